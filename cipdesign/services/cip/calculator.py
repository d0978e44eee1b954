# cipdesign/services/cip/calculator.py
# CIP skid sizing for a 2-stage RO train.
# - 순수 함수: I/O 없음, 유효한 입력에 대해 항상 결과를 반환
# - BOM 순서 자체가 표현 계약 (Pump → Tank → [Heater] → ... → Controls)

from __future__ import annotations

import math
from typing import List, Optional

from cipdesign.schemas import BomLine, CIPDesignResult, CIPInput, DesignSummary

# ============================================================
# Constants
# ============================================================
GAL_PER_VESSEL = 40.0  # 8" pressure vessel 1개당 공칭 체적
TANK_VOLUME_FACTOR = 1.5  # 가장 큰 stage 체적의 1.5배 이상
TANK_MIN_GAL = 400
TANK_STEP_GAL = 50

KG_PER_GAL = 3.785  # 물 밀도 근사 (~liters)
CP_WATER_KJ_PER_KG_K = 4.186
HEATER_MARGIN = 1.4  # 열손실/여유율
HEATER_BAND_KW = (36, 45)  # 카탈로그 히터 밴드 (물리 결과가 아님, 그대로 clamp)


# ============================================================
# Basic helpers
# ============================================================
def round_up_to(step: float, v: float) -> int:
    """v를 step 단위로 올림."""
    return int(math.ceil(v / step) * step)


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp x to [lo, hi]."""
    return max(lo, min(hi, x))


def fmt_num(v: float) -> str:
    """정수값이면 '.0' 없이 (240.0 → '240'), 아니면 그대로."""
    x = float(v)
    if x.is_integer():
        return str(int(x))
    return repr(x)


# ============================================================
# Sizing steps
# ============================================================
def size_tank_gal(vessels_stage1: int, vessels_stage2: int) -> int:
    v1 = vessels_stage1 * GAL_PER_VESSEL
    v2 = vessels_stage2 * GAL_PER_VESSEL
    return max(TANK_MIN_GAL, round_up_to(TANK_STEP_GAL, max(v1, v2) * TANK_VOLUME_FACTOR))


def heating_energy_kwh(tank_gal: float, start_temp_c: float, target_temp_c: float) -> float:
    """탱크 전체를 start → target 까지 올리는 데 필요한 열량 (kWh). ΔT<0 이면 0."""
    mass_kg = tank_gal * KG_PER_GAL
    delta_t = max(0.0, target_temp_c - start_temp_c)
    return (mass_kg * CP_WATER_KJ_PER_KG_K * delta_t) / 3600.0


def size_heater_kw(tank_gal: float, start_temp_c: float, target_temp_c: float) -> int:
    energy = heating_energy_kwh(tank_gal, start_temp_c, target_temp_c)
    lo, hi = HEATER_BAND_KW
    return int(clamp(math.ceil(energy * HEATER_MARGIN), lo, hi))


def pump_text(mains_hz: int, head_assumption_ft: float) -> str:
    if mains_hz == 50:
        return (
            'Goulds e-SH 2.5×3-8 (25SH08), ~7-1/8" trim, '
            f"≈240 gpm @ ~{fmt_num(head_assumption_ft)} ft, 15 kW IE3, 50 Hz"
        )
    return "Goulds e-SH 65-160/…, ≈240 gpm @ ~110 ft, 10–15 HP, 60 Hz"


def build_bom(
    inp: CIPInput,
    *,
    fmax: float,
    tank_gal: int,
    heater_kw: Optional[int],
    cartridges: int,
    pump: str,
) -> List[BomLine]:
    bom: List[BomLine] = [
        BomLine(
            item="Pump",
            qty=1,
            specification=pump,
            comments="VFD-driven; keep ΔP/vessel ≤10–15 psi",
        ),
        BomLine(
            item="CIP Tank",
            qty=1,
            specification=f"{tank_gal} gal 316SS cone-bottom with LL/L/HL switches",
            comments="≥1.5× largest stage volume",
        ),
    ]

    if inp.heater:
        bom.append(
            BomLine(
                item="Heater",
                qty=1,
                specification=f"Electric immersion {heater_kw} kW, RTD + over-temp",
                comments=(
                    f"Heat {tank_gal} gal from "
                    f"{fmt_num(inp.start_temp_c)}→{fmt_num(inp.target_temp_c)} °C"
                ),
            )
        )

    bom.extend(
        [
            BomLine(
                item="Cartridge Filter Housing",
                qty=1,
                specification=f'30-round, 30", 5 µm absolute, ≥{fmt_num(fmax)} gpm',
            ),
            BomLine(
                item="Filter Cartridges",
                qty=cartridges,
                specification='30" 5 µm absolute (PP/nylon), high-temp',
                comments=f"Design ~{fmt_num(inp.gpm_per_cartridge)} gpm per cartridge",
            ),
            BomLine(
                item="Mag Flowmeter",
                qty=1,
                specification='0–300 gpm, 2–4"',
                comments="One per active loop",
            ),
            BomLine(
                item="Pressure Gauges/Transmitters",
                qty=2,
                specification="Feed & return headers",
            ),
            BomLine(
                item="Valves & Piping",
                qty=1,
                specification='316L SS headers 4", branches 2"',
                comments="Stage-select + reverse-flow ties",
            ),
            BomLine(
                item="Controls (PLC + HMI)",
                qty=1,
                specification="Recipe selector, permissives, logging",
            ),
        ]
    )
    return bom


# ============================================================
# Entry point
# ============================================================
def calculate(inp: CIPInput) -> CIPDesignResult:
    """입력 레코드 → {summary, bom}. 가격(unitCost/extendedCost)은 비어 있음."""
    f1 = inp.vessels_stage1 * inp.per_vessel_flow_gpm
    f2 = inp.vessels_stage2 * inp.per_vessel_flow_gpm
    fmax = max(f1, f2)

    tank_gal = size_tank_gal(inp.vessels_stage1, inp.vessels_stage2)

    heater_kw: Optional[int] = None
    if inp.heater:
        heater_kw = size_heater_kw(tank_gal, inp.start_temp_c, inp.target_temp_c)

    # 30" absolute 카트리지, 기본 ~10 gpm/cartridge
    cartridges = int(math.ceil(fmax / inp.gpm_per_cartridge))

    pump = pump_text(inp.mains_hz, inp.head_assumption_ft)

    bom = build_bom(
        inp,
        fmax=fmax,
        tank_gal=tank_gal,
        heater_kw=heater_kw,
        cartridges=cartridges,
        pump=pump,
    )

    return CIPDesignResult(
        summary=DesignSummary(
            f1=f1,
            f2=f2,
            fmax=fmax,
            tank_gal=tank_gal,
            heater_kw=heater_kw,
            pump=pump,
        ),
        bom=bom,
    )
