"""btc-query exceptions."""


class BtcQueryError(Exception):
    """Base exception for btc-query."""


class InvalidPaymentError(BtcQueryError):
    """A string could not be decoded as a particular payment format."""

    def __init__(self, text: str, reason: str):
        self.text = text
        self.reason = reason
        super().__init__(f"Invalid payment string: {reason}")


class ParseFailureError(BtcQueryError):
    """The query matches none of the recognized payment kinds."""

    message = "not a known bitcoin string"

    def __init__(self, query: str):
        self.query = query
        super().__init__(self.message)


class EncodingFailureError(BtcQueryError):
    """Re-encoding an embedded nostr key as bech32 failed."""

    def __init__(self, key_hex: str, reason: str):
        self.key_hex = key_hex
        self.reason = reason
        super().__init__(f"Failed to encode nostr key: {reason}")


class SerializationFailureError(BtcQueryError):
    """The assembled record could not be rendered as JSON."""

    def __init__(self, cause: str):
        self.cause = cause
        super().__init__(f"error creating json output caused by: {cause}")
