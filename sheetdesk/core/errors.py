"""
Error types shared by the services and the HTTP layer.

Services raise these; the routers turn them into HTTPException with the
status code carried by the error.
"""


class SheetDeskError(Exception):
    """Base exception for SheetDesk errors"""
    status_code = 500


class ValidationError(SheetDeskError):
    """Bad or missing identifier, or a file type that is not allowed"""
    status_code = 400


class ParseError(SheetDeskError):
    """The uploaded file could not be read as a spreadsheet"""
    status_code = 500


class StoreError(SheetDeskError):
    """Reading from or writing to the database failed"""
    status_code = 500


class NotFoundError(SheetDeskError):
    """The requested dataset does not exist"""
    status_code = 404
