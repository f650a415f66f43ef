"""
경품 테이블과 가중치 추첨

select() 는 누적 가중치에 대한 역CDF 탐색이다. 난수는 호출자가 주입하므로
같은 입력에 대해 항상 같은 결과를 돌려준다.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from wheelapi.core.exceptions import InvalidInputError


@dataclass(frozen=True)
class PrizeDefinition:
    """휠의 한 칸"""

    label: str
    weight: float
    reward_tag: str = ""


# 순서는 휠 위의 배치이자 추첨 구간의 경계
DEFAULT_PRIZES: Tuple[PrizeDefinition, ...] = (
    PrizeDefinition("ตุ๊กตาใหญ่", 0.1, "🧸🧸🧸"),
    PrizeDefinition("ตุ๊กตาไซส์เล็ก", 2.9, "🧸"),
    PrizeDefinition("คูปองสปอนเซอร์", 30.0, "🎟️"),
    PrizeDefinition("ตั๋วโหวตฟรี", 40.0, "🗳️"),
    PrizeDefinition("ขนมสปอนเซอร์", 10.0, "🍬"),
    PrizeDefinition("ขนมกรุบกรอบปลอบใจ", 17.0, "🍪"),
)


def validate_prize_table(prizes: Sequence[PrizeDefinition]) -> float:
    """테이블을 검증하고 가중치 합계를 반환"""
    if not prizes:
        raise InvalidInputError("Prize table must not be empty")

    total = 0.0
    for index, prize in enumerate(prizes):
        weight = prize.weight
        if isinstance(weight, bool) or not isinstance(weight, (int, float)):
            raise InvalidInputError(f"Prize #{index} weight is not a number: {weight!r}")
        if not math.isfinite(weight) or weight <= 0:
            raise InvalidInputError(
                f"Prize #{index} ({prize.label}) must have a positive weight, got {weight}"
            )
        total += weight
    return total


def select(prizes: Sequence[PrizeDefinition], draw: float) -> int:
    """draw ∈ [0, 1) 를 경품 인덱스로 변환

    구간은 [누적_이전, 누적_이후) 이고 경계값은 앞 경품이 가져간다.
    부동소수점 오차로 끝까지 찾지 못하면 마지막 인덱스를 반환한다.
    """
    total = validate_prize_table(prizes)
    if isinstance(draw, bool) or not isinstance(draw, (int, float)):
        raise InvalidInputError(f"Draw must be a number, got {draw!r}")
    if not (0.0 <= draw < 1.0):
        raise InvalidInputError(f"Draw must be in [0, 1), got {draw}")

    scaled = draw * total
    cumulative = 0.0
    for index, prize in enumerate(prizes):
        cumulative += prize.weight
        if cumulative >= scaled:
            return index
    return len(prizes) - 1


def build_prize_table(raw: Optional[Iterable[dict]] = None) -> Tuple[PrizeDefinition, ...]:
    """설정값(JSON 목록)에서 테이블 생성, 없으면 기본 테이블"""
    if raw is None:
        prizes: List[PrizeDefinition] = list(DEFAULT_PRIZES)
    else:
        prizes = []
        for item in raw:
            try:
                prizes.append(
                    PrizeDefinition(
                        label=str(item["label"]),
                        weight=float(item["weight"]),
                        reward_tag=str(item.get("reward_tag", "")),
                    )
                )
            except (KeyError, TypeError, ValueError) as e:
                raise InvalidInputError(f"Malformed prize entry {item!r}: {e}") from e

    validate_prize_table(prizes)
    return tuple(prizes)
