# cipdesign/schemas/common.py
from enum import Enum
from pydantic import BaseModel, ConfigDict


class AppBaseModel(BaseModel):
    """모든 모델의 부모 클래스: V2 설정 적용"""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        from_attributes=True,
    )


class SystemType(str, Enum):
    CIP_RO = "cip-ro"
    ION_EXCHANGE = "ion-exchange"
    MEDIA_FILTRATION = "media-filtration"
    ULTRAFILTRATION = "ultrafiltration"


SYSTEM_DISPLAY_NAMES = {
    SystemType.CIP_RO.value: "Membrane Cleaning System (CIP for Reverse Osmosis)",
    SystemType.ION_EXCHANGE.value: "Ion Exchange System",
    SystemType.MEDIA_FILTRATION.value: "Media Filtration System",
    SystemType.ULTRAFILTRATION.value: "Ultrafiltration System",
}


def system_display_name(system_type: str) -> str:
    return SYSTEM_DISPLAY_NAMES.get(system_type, "Water Treatment System")
