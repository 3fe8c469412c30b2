"""Custom exception hierarchy for the output event models."""


class ModelsError(Exception):
    """Base exception for all event model errors."""


# --- Decoding ---
class HashDecodeError(ModelsError):
    """Bytes or text do not decode to a valid digest.

    Raised for wrong-length input, malformed base58 and checksum mismatch
    alike. Callers should treat it as a data-integrity signal.
    """


# --- Producer boundary ---
class EventValidationError(ModelsError):
    """Event rejected where it is constructed."""


class DuplicateEventError(EventValidationError):
    """Event id or index already used in the same (slot, read_only) domain."""

    def __init__(self, slot: object, read_only: bool, index_in_slot: int):
        self.slot = slot
        self.read_only = read_only
        self.index_in_slot = index_in_slot
        super().__init__(
            f"Duplicate event at {slot} "
            f"[read_only={read_only}, index_in_slot={index_in_slot}]"
        )


# --- Configuration ---
class ConfigError(ModelsError):
    """Invalid or missing configuration."""
