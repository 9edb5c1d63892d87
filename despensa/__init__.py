"""Household food inventory tracking with AI-assisted registration."""

from .analytics import WasteSummary
from .config import (
    DatabaseConfig,
    GatewayConfig,
    ProfileConfig,
    SchedulerConfig,
    TrackerConfig,
    load_config,
)
from .errors import (
    DespensaError,
    GatewayError,
    GatewayMalformedResponse,
    GatewayTimeout,
    GatewayUnavailable,
    TrackerBusyError,
)
from .gateway import (
    AcquisitionRecord,
    ConsumptionRecord,
    ExtractionGateway,
    create_gateway,
)
from .inventory import InventoryStore
from .models import (
    FoodItem,
    FoodStatus,
    ShoppingListItem,
    ShoppingPriority,
    ShoppingReason,
    StorageType,
    UserPlan,
    UserProfile,
)
from .shopping import ShoppingList
from .tracker import FoodTracker, OperationResult
from .voice import VoiceCapture

__all__ = [
    "FoodTracker",
    "OperationResult",
    "InventoryStore",
    "ShoppingList",
    "WasteSummary",
    "VoiceCapture",
    "ExtractionGateway",
    "AcquisitionRecord",
    "ConsumptionRecord",
    "create_gateway",
    "FoodItem",
    "FoodStatus",
    "ShoppingListItem",
    "ShoppingPriority",
    "ShoppingReason",
    "StorageType",
    "UserPlan",
    "UserProfile",
    "DespensaError",
    "GatewayError",
    "GatewayUnavailable",
    "GatewayMalformedResponse",
    "GatewayTimeout",
    "TrackerBusyError",
    "TrackerConfig",
    "GatewayConfig",
    "DatabaseConfig",
    "ProfileConfig",
    "SchedulerConfig",
    "load_config",
]
