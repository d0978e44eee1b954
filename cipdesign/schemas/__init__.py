# cipdesign/schemas/__init__.py
# (Barrel File: 엔드포인트/서비스에서 한 곳으로 import)

from .common import AppBaseModel, SystemType, system_display_name

from .cip import (
    CIPInput,
    BomLine,
    DesignSummary,
    CIPDesignResult,
    DesignRunOut,
    DeleteOut,
    CatalogItemOut,
    PriceLineIn,
    PriceLineOut,
)

from .ai import (
    ChatMessage,
    SystemContext,
    ChatRequest,
    AssistantMessage,
    ChatResponse,
    ValidationRequest,
    ValidationResponse,
)
