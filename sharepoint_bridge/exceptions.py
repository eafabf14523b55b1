class BridgeError(Exception):
    """Base class for every error raised by the SharePoint bridge."""

    def __init__(self, message: str = None, *, cause: Exception = None):
        if message is None:
            message = "SharePoint bridge request failed"
        super().__init__(message)
        # Optional chaining for debugging
        self.__cause__ = cause


class InvalidStructureError(BridgeError):
    """Raised when the requested structure is not served by the bridge."""

    def __init__(self, structure: str, message: str = None):
        self.structure = structure
        if message is None:
            message = f"Invalid Structure: '{structure}' is not a valid structure"
        super().__init__(message)


class QueryParseError(BridgeError):
    """Raised when a qualification template cannot be resolved."""

    def __init__(self, message: str = None, *, parameter: str = None):
        self.parameter = parameter
        if message is None:
            message = "Unable to parse the qualification"
        super().__init__(message)


class SharePointConnectionError(BridgeError):
    """Raised when the query could not be executed against SharePoint.

    The message stays generic; transport details are logged and kept on the
    attributes for diagnostics.
    """

    def __init__(
        self,
        message: str = None,
        *,
        status_code: int | None = None,
        url: str | None = None,
        cause: Exception = None,
    ):
        self.status_code = status_code
        self.url = url
        if message is None:
            message = (
                "Unable to make a connection to properly execute the query "
                "to Sharepoint"
            )
        super().__init__(message, cause=cause)


class XmlParseError(BridgeError):
    """Raised when the SharePoint response is not a parsable XML feed."""

    def __init__(self, detail: str = None, *, cause: Exception = None):
        self.detail = detail
        super().__init__("Parsing of the XML response failed", cause=cause)


class AmbiguousResultError(BridgeError):
    """Raised when a retrieve query matches more than one entry."""

    def __init__(self, count: int, message: str = None):
        self.count = count
        if message is None:
            message = "Multiple results matched an expected single match query"
        super().__init__(message)
