from setuptools import find_packages, setup

with open("./README.md", encoding='utf-8') as in_:
    setup(
        name='xlsxwriter-xtable',
        version='0.1.0',
        packages=find_packages(where='src'),
        package_dir={
            "": "src"
        },
        license='MIT',
        description='A cursor based writer for XlsxWriter workbooks with cascading global, row and cell formatting '
                    'options, so that tables can be written without dealing with absolute coordinates.',
        long_description=in_.read(),
        long_description_content_type="text/markdown",
        python_requires='>=3.6',
        install_requires=[
            "attrs",
            "xlsxwriter>=3.0.2",
        ],
        extras_require={
            'testing': ['pytest', 'pytest-mock']
        },
    )
