from pprint import pformat


class XTableError(Exception):
    """Base XTable error"""

    def __init__(self, message, sheet=None, coords=None, data=None):
        self.message = message
        self.sheet = sheet
        self.coords = coords
        self.data = data

    def __str__(self):
        segments = []
        if self.sheet is not None:
            segments.append(f"Sheet: {self.sheet}")
        if self.coords is not None:
            segments.append(f"Coords: {self.coords}")
        if self.data is not None:
            segments.append(f"Offending data: {pformat(self.data)}")
        additional_info = "\n".join(segments)

        full_message = [self.message]
        if additional_info:
            full_message.append(f"Additional info:\n{additional_info}")

        return "\n".join(full_message)


class SheetXTableError(XTableError):
    """An XTable error triggered by addressing a sheet that does not exist"""


class RenderXTableError(XTableError):
    """An XTable error triggered by XlsxWriter rejecting data while saving."""
