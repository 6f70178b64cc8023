"""
Sexagenary cycle (六十甲子) tables and the pure rules built on them.

Handles:
- Heavenly stem / earthly branch definitions
- Membership test for the 60 cycle codes
- Numeric range checks for birth year and luck-cycle start age
- Luck-cycle (大运 Da Yun) direction from year stem polarity + gender
- Advisory luck-cycle preview and first-luck-cycle expectation

Design principle: every function here is total. Bad input yields False,
None, UNKNOWN or an empty list, never an exception.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from bazi_intake.config import (
    BIRTH_YEAR_MIN, BIRTH_YEAR_MAX, START_AGE_MIN, START_AGE_MAX,
    LUCK_CYCLE_PREVIEW_COUNT,
)

logger = logging.getLogger(__name__)


# ============================================================
# FUNDAMENTAL DATA STRUCTURES
# ============================================================

class Polarity(Enum):
    YANG = "yang"
    YIN = "yin"


class Element(Enum):
    WOOD = "wood"
    FIRE = "fire"
    EARTH = "earth"
    METAL = "metal"
    WATER = "water"


class Gender(Enum):
    MALE = "male"
    FEMALE = "female"


class LuckDirection(Enum):
    FORWARD = "forward"
    BACKWARD = "backward"
    UNKNOWN = "unknown"

    @property
    def step(self) -> int:
        """+1 / -1 through the cycle, 0 when undetermined."""
        return {"forward": 1, "backward": -1}.get(self.value, 0)

    @property
    def label(self) -> str:
        return _DIRECTION_LABELS[self]


_DIRECTION_LABELS = {
    LuckDirection.FORWARD: "顺行 (阳男/阴女)",
    LuckDirection.BACKWARD: "逆行 (阴男/阳女)",
    LuckDirection.UNKNOWN: "等待输入年柱...",
}


@dataclass(frozen=True)
class HeavenlyStem:
    chinese: str
    pinyin: str
    element: Element
    polarity: Polarity
    index: int  # 0-9

    def __str__(self):
        return f"{self.pinyin} ({self.polarity.value} {self.element.value})"


@dataclass(frozen=True)
class EarthlyBranch:
    chinese: str
    pinyin: str
    animal: str
    element: Element
    polarity: Polarity
    index: int  # 0-11

    def __str__(self):
        return f"{self.pinyin} ({self.animal})"


@dataclass(frozen=True)
class CyclePillar:
    """A resolved cycle code: its stem, branch and position in the 60-cycle."""
    stem: HeavenlyStem
    branch: EarthlyBranch
    index: int  # 0-59

    @property
    def code(self) -> str:
        return self.stem.chinese + self.branch.chinese

    def __str__(self):
        return f"{self.code} {self.stem.pinyin} {self.branch.pinyin} ({self.branch.animal})"

    def to_dict(self):
        return {
            "code": self.code,
            "index": self.index,
            "stem": {
                "chinese": self.stem.chinese,
                "pinyin": self.stem.pinyin,
                "element": self.stem.element.value,
                "polarity": self.stem.polarity.value,
            },
            "branch": {
                "chinese": self.branch.chinese,
                "pinyin": self.branch.pinyin,
                "animal": self.branch.animal,
                "element": self.branch.element.value,
            },
        }


# ============================================================
# STEM AND BRANCH DEFINITIONS
# ============================================================

HEAVENLY_STEMS = (
    HeavenlyStem("甲", "Jia", Element.WOOD, Polarity.YANG, 0),
    HeavenlyStem("乙", "Yi", Element.WOOD, Polarity.YIN, 1),
    HeavenlyStem("丙", "Bing", Element.FIRE, Polarity.YANG, 2),
    HeavenlyStem("丁", "Ding", Element.FIRE, Polarity.YIN, 3),
    HeavenlyStem("戊", "Wu", Element.EARTH, Polarity.YANG, 4),
    HeavenlyStem("己", "Ji", Element.EARTH, Polarity.YIN, 5),
    HeavenlyStem("庚", "Geng", Element.METAL, Polarity.YANG, 6),
    HeavenlyStem("辛", "Xin", Element.METAL, Polarity.YIN, 7),
    HeavenlyStem("壬", "Ren", Element.WATER, Polarity.YANG, 8),
    HeavenlyStem("癸", "Gui", Element.WATER, Polarity.YIN, 9),
)

EARTHLY_BRANCHES = (
    EarthlyBranch("子", "Zi", "Rat", Element.WATER, Polarity.YANG, 0),
    EarthlyBranch("丑", "Chou", "Ox", Element.EARTH, Polarity.YIN, 1),
    EarthlyBranch("寅", "Yin", "Tiger", Element.WOOD, Polarity.YANG, 2),
    EarthlyBranch("卯", "Mao", "Rabbit", Element.WOOD, Polarity.YIN, 3),
    EarthlyBranch("辰", "Chen", "Dragon", Element.EARTH, Polarity.YANG, 4),
    EarthlyBranch("巳", "Si", "Snake", Element.FIRE, Polarity.YIN, 5),
    EarthlyBranch("午", "Wu", "Horse", Element.FIRE, Polarity.YANG, 6),
    EarthlyBranch("未", "Wei", "Goat", Element.EARTH, Polarity.YIN, 7),
    EarthlyBranch("申", "Shen", "Monkey", Element.METAL, Polarity.YANG, 8),
    EarthlyBranch("酉", "You", "Rooster", Element.METAL, Polarity.YIN, 9),
    EarthlyBranch("戌", "Xu", "Dog", Element.EARTH, Polarity.YANG, 10),
    EarthlyBranch("亥", "Hai", "Pig", Element.WATER, Polarity.YIN, 11),
)

STEM_BY_CHINESE = {s.chinese: s for s in HEAVENLY_STEMS}
YANG_STEMS = frozenset(s.chinese for s in HEAVENLY_STEMS if s.polarity is Polarity.YANG)


# ============================================================
# THE SIXTY CYCLE CODES
# ============================================================

# Position i pairs stem i % 10 with branch i % 12: 甲子, 乙丑, ... 癸亥.
SIXTY_JIAZI = (
    "甲子", "乙丑", "丙寅", "丁卯", "戊辰", "己巳", "庚午", "辛未", "壬申", "癸酉",
    "甲戌", "乙亥", "丙子", "丁丑", "戊寅", "己卯", "庚辰", "辛巳", "壬午", "癸未",
    "甲申", "乙酉", "丙戌", "丁亥", "戊子", "己丑", "庚寅", "辛卯", "壬辰", "癸巳",
    "甲午", "乙未", "丙申", "丁酉", "戊戌", "己亥", "庚子", "辛丑", "壬寅", "癸卯",
    "甲辰", "乙巳", "丙午", "丁未", "戊申", "己酉", "庚戌", "辛亥", "壬子", "癸丑",
    "甲寅", "乙卯", "丙辰", "丁巳", "戊午", "己未", "庚申", "辛酉", "壬戌", "癸亥",
)

_CODE_SET = frozenset(SIXTY_JIAZI)
_CODE_INDEX = {code: i for i, code in enumerate(SIXTY_JIAZI)}

_INTEGER_TEXT = re.compile(r"[+-]?[0-9]+")
# Whitespace as JavaScript's String.trim sees it: Unicode spaces plus the BOM
_SURROUNDING_SPACE = re.compile(r"^[\s\ufeff]+|[\s\ufeff]+$")


# ============================================================
# VALIDATORS
# ============================================================

def trim(value: str) -> str:
    """Drop surrounding whitespace, including a leading or trailing U+FEFF."""
    return _SURROUNDING_SPACE.sub("", value)


def is_valid_cycle_code(value: str) -> bool:
    """True iff the trimmed value is exactly one of the 60 cycle codes."""
    return trim(value) in _CODE_SET


def parse_int(value: str) -> Optional[int]:
    """
    Strict base-10 integer parse.

    Accepts optional surrounding whitespace and a leading sign, nothing
    else: "3.5", "1e3", "1_990" and non-ASCII digits all give None, as do
    digit strings past the interpreter's int conversion limit.
    """
    text = trim(value)
    if not _INTEGER_TEXT.fullmatch(text):
        return None
    try:
        return int(text)
    except ValueError:
        return None


def _in_range(value: str, low: int, high: int) -> bool:
    number = parse_int(value)
    return number is not None and low <= number <= high


def is_valid_birth_year(value: str) -> bool:
    return _in_range(value, BIRTH_YEAR_MIN, BIRTH_YEAR_MAX)


def is_valid_start_age(value: str) -> bool:
    return _in_range(value, START_AGE_MIN, START_AGE_MAX)


# ============================================================
# CODE RESOLUTION
# ============================================================

def cycle_code_at(index: int) -> str:
    """Cycle code at any integer position, wrapping modulo 60."""
    return SIXTY_JIAZI[index % 60]


def parse_cycle_code(value: str) -> Optional[CyclePillar]:
    """Resolve a code to its stem and branch, or None if it is not one of the 60."""
    index = _CODE_INDEX.get(trim(value))
    if index is None:
        return None
    return CyclePillar(
        stem=HEAVENLY_STEMS[index % 10],
        branch=EARTHLY_BRANCHES[index % 12],
        index=index,
    )


# ============================================================
# LUCK CYCLE DIRECTION
# ============================================================

def derive_direction(year_pillar: str, gender: Gender) -> LuckDirection:
    """
    Direction of the luck-cycle count through the sixty cycle.

    - Yang stem year + Male OR Yin stem year + Female → FORWARD
    - Yang stem year + Female OR Yin stem year + Male → BACKWARD

    UNKNOWN while the year pillar is empty or not a valid code.
    """
    if not year_pillar or not is_valid_cycle_code(year_pillar):
        return LuckDirection.UNKNOWN

    stem = trim(year_pillar)[0]
    year_yang = stem in YANG_STEMS
    forward = year_yang if gender is Gender.MALE else not year_yang

    direction = LuckDirection.FORWARD if forward else LuckDirection.BACKWARD
    logger.debug("Direction for %s/%s: %s", stem, gender.value, direction.value)
    return direction


# ============================================================
# ADVISORY LUCK CYCLE PREVIEW
# ============================================================

def expected_first_da_yun(month_pillar: str, direction: LuckDirection) -> Optional[str]:
    """
    The traditional first luck cycle: one step from the month pillar,
    forward or backward. None when either input is undetermined.
    """
    pillar = parse_cycle_code(month_pillar)
    if pillar is None or direction is LuckDirection.UNKNOWN:
        return None
    return cycle_code_at(pillar.index + direction.step)


def luck_cycle_sequence(first_da_yun: str, direction: LuckDirection,
                        start_age: str,
                        count: int = LUCK_CYCLE_PREVIEW_COUNT) -> list[dict]:
    """
    List the luck cycles that follow from the entered first cycle.

    Each cycle covers ten years; the first starts at start_age. The codes
    step through the sixty cycle in the given direction.

    Returns:
        List of dicts with number, code, stem, branch, age_start, age_end.
        Empty if any input is invalid or the direction is UNKNOWN.
    """
    first = parse_cycle_code(first_da_yun)
    if first is None or direction is LuckDirection.UNKNOWN or not is_valid_start_age(start_age):
        return []

    age = parse_int(start_age)
    cycles = []
    for i in range(count):
        pillar = parse_cycle_code(cycle_code_at(first.index + i * direction.step))
        age_start = age + i * 10
        cycles.append({
            "number": i + 1,
            "code": pillar.code,
            "stem": pillar.stem.pinyin,
            "branch": pillar.branch.pinyin,
            "branch_animal": pillar.branch.animal,
            "age_start": age_start,
            "age_end": age_start + 9,
        })

    return cycles
