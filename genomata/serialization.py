"""
Bot <-> JSON encoding for manual cell editing and export.

The encoding is field-for-field and reconstructs an identical bot:

    {
      "alive": true, "empty": false, "x": 3, "y": 7,
      "energy": 5.0, "direction": "Left", "color": [12, 200, 40],
      "age": 0, "current_instruction": 0,
      "genome": [{"instruction": "Photosynthesis", "option": false,
                  "energy": 3.2, "branch": 4, "branch_alt": 11}, ...]
    }
"""

import json
from typing import Any, Dict, Optional

from .bot import Bot
from .color import Color
from .config import GENOME_LENGTH
from .direction import Direction
from .gene import Gene, Instruction


class CellDecodeError(ValueError):
    """Imported cell data could not be turned into a Bot"""


def gene_to_dict(gene: Gene) -> Dict[str, Any]:
    return {
        "instruction": gene.instruction.value,
        "option": bool(gene.option),
        "energy": float(gene.energy),
        "branch": int(gene.branch),
        "branch_alt": int(gene.branch_alt),
    }


def bot_to_dict(bot: Bot) -> Dict[str, Any]:
    return {
        "alive": bool(bot.alive),
        "empty": bool(bot.empty),
        "x": int(bot.x),
        "y": int(bot.y),
        "energy": float(bot.energy),
        "direction": bot.direction.value,
        "color": [int(bot.color.r), int(bot.color.g), int(bot.color.b)],
        "age": int(bot.age),
        "genome": [gene_to_dict(g) for g in bot.genome],
        "current_instruction": int(bot.current_instruction),
    }


def bot_to_json(bot: Bot, indent: Optional[int] = 2) -> str:
    return json.dumps(bot_to_dict(bot), indent=indent)


# -------------------------------------------------
# Decoding
# -------------------------------------------------

def _index(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise CellDecodeError(f"{name} must be an integer, got {value!r}")
    if not (0 <= value < GENOME_LENGTH):
        raise CellDecodeError(f"{name} must be in [0, {GENOME_LENGTH}), got {value}")
    return value


def _number(value, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CellDecodeError(f"{name} must be a number, got {value!r}")
    return float(value)


def _flag(value, name: str) -> bool:
    if not isinstance(value, bool):
        raise CellDecodeError(f"{name} must be true/false, got {value!r}")
    return value


def gene_from_dict(data: Dict[str, Any]) -> Gene:
    try:
        instruction = Instruction(data["instruction"])
        return Gene(
            instruction=instruction,
            option=_flag(data["option"], "option"),
            energy=_number(data["energy"], "energy"),
            branch=_index(data["branch"], "branch"),
            branch_alt=_index(data["branch_alt"], "branch_alt"),
        )
    except KeyError as e:
        raise CellDecodeError(f"gene is missing field {e}") from e
    except (TypeError, ValueError) as e:
        if isinstance(e, CellDecodeError):
            raise
        raise CellDecodeError(f"invalid gene: {e}") from e


def bot_from_dict(data: Dict[str, Any]) -> Bot:
    """Rebuild a Bot; raises CellDecodeError on any malformed field"""
    if not isinstance(data, dict):
        raise CellDecodeError("cell must be a JSON object")
    try:
        genome_data = data["genome"]
        if not isinstance(genome_data, list) or len(genome_data) != GENOME_LENGTH:
            raise CellDecodeError(f"genome must be a list of {GENOME_LENGTH} genes")

        color = data["color"]
        if not isinstance(color, list) or len(color) != 3:
            raise CellDecodeError("color must be [r, g, b]")
        r, g, b = (int(_number(c, "color")) for c in color)
        if not all(0 <= c <= 255 for c in (r, g, b)):
            raise CellDecodeError("color channels must be in [0, 255]")

        age = data["age"]
        if isinstance(age, bool) or not isinstance(age, int) or age < 0:
            raise CellDecodeError(f"age must be a non-negative integer, got {age!r}")

        x, y = data["x"], data["y"]
        if any(isinstance(v, bool) or not isinstance(v, int) or v < 0 for v in (x, y)):
            raise CellDecodeError("coordinates must be non-negative integers")

        alive = _flag(data["alive"], "alive")
        empty = _flag(data["empty"], "empty")
        energy = _number(data["energy"], "energy")
        if alive and empty:
            raise CellDecodeError("a cell cannot be both alive and empty")
        if empty and energy != 0.0:
            raise CellDecodeError(f"an empty cell holds no energy, got {energy}")

        return Bot(
            alive=alive,
            empty=empty,
            x=x,
            y=y,
            energy=energy,
            direction=Direction(data["direction"]),
            color=Color(r, g, b),
            age=age,
            genome=[gene_from_dict(gd) for gd in genome_data],
            current_instruction=_index(data["current_instruction"], "current_instruction"),
        )
    except KeyError as e:
        raise CellDecodeError(f"cell is missing field {e}") from e
    except (TypeError, ValueError) as e:
        if isinstance(e, CellDecodeError):
            raise
        raise CellDecodeError(f"invalid cell: {e}") from e


def bot_from_json(text: str) -> Bot:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CellDecodeError(f"not valid JSON: {e}") from e
    return bot_from_dict(data)


def try_bot_from_json(text: str) -> Optional[Bot]:
    """Like bot_from_json, but reports the failure and returns None"""
    try:
        return bot_from_json(text)
    except CellDecodeError as e:
        print(f"[WARNING] cell import refused: {e}")
        return None
