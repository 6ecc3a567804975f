from shipyard.imports.aggregator import MessageAggregator, aggregate
from shipyard.imports.applier import (
    CreateApplication,
    KeepExistingApplication,
    apply_descriptor,
)
from shipyard.imports.decoders import DescriptorFormat, decode_descriptor
from shipyard.imports.errors import (
    ImportErrorKind,
    ImportParseError,
    ShipyardImportError,
)
from shipyard.imports.messages import Message, MessageKind, render_messages
from shipyard.imports.models import (
    DEFAULT_ENVIRONMENT,
    ApplicationDescriptor,
    EnvironmentRef,
    ImportApplyResult,
    ImportOutcome,
    ImportStatus,
    ImportValidationResult,
)
from shipyard.imports.pipeline import import_application
from shipyard.imports.sanity import check_application_sanity
from shipyard.imports.validator import validate_references

__all__ = [
    "MessageAggregator",
    "aggregate",
    "Message",
    "MessageKind",
    "render_messages",
    "DescriptorFormat",
    "decode_descriptor",
    "ImportErrorKind",
    "ImportParseError",
    "ShipyardImportError",
    "DEFAULT_ENVIRONMENT",
    "EnvironmentRef",
    "ApplicationDescriptor",
    "ImportValidationResult",
    "ImportApplyResult",
    "ImportOutcome",
    "ImportStatus",
    "validate_references",
    "apply_descriptor",
    "CreateApplication",
    "KeepExistingApplication",
    "check_application_sanity",
    "import_application",
]
