"""Extract top-level constant declarations from script sources.

The scanner is a line-oriented heuristic, not a parser. It counts braces
naively (strings and comments containing braces are miscounted) and only
recognizes declarations while the running brace depth is zero.
"""

from __future__ import annotations

import logging
import re

from .models import (
    KIND_ARRAY,
    KIND_BOOLEAN,
    KIND_NUMBER,
    KIND_OBJECT,
    KIND_STRING,
    KIND_UNKNOWN,
    OBJECT_SENTINEL,
    ConstantRecord,
)


logger = logging.getLogger(__name__)

CONST_PREFIX = "const "
EXPORT_CONST_PREFIX = "export const "
COMMENT_PREFIX = "//"
FUNCTION_MARKERS = ("function", "=>")
OBJECT_OPENERS = ("={", "= {")
NAME_TERMINATORS = re.compile(r"[=:,]")
NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def extract_constants(content: str, file_path: str) -> list[ConstantRecord]:
    """Scan ``content`` line by line and return its top-level constants.

    Multi-line object literals opened at depth zero (``const NAME = {``)
    produce a single ``object`` record located at the opening line once the
    depth returns to zero. Lines inside such a span are never treated as
    declarations of their own.
    """
    records: list[ConstantRecord] = []

    block_depth = 0
    in_object = False
    object_name = ""
    object_line = 0

    for index, line in enumerate(content.split("\n")):
        line_number = index + 1
        trimmed = line.strip()

        if not trimmed or trimmed.startswith(COMMENT_PREFIX):
            continue

        depth_before = block_depth
        open_braces = line.count("{")
        close_braces = line.count("}")
        block_depth += open_braces - close_braces

        if (
            not in_object
            and depth_before == 0
            and block_depth > 0
            and any(opener in trimmed for opener in OBJECT_OPENERS)
        ):
            in_object = True
            object_line = line_number
            object_name = _declared_name(trimmed) if _is_declaration(trimmed) else ""
            continue

        if in_object:
            if close_braces > 0 and block_depth == 0:
                in_object = False
                if object_name:
                    records.append(
                        ConstantRecord(
                            name=object_name,
                            value=OBJECT_SENTINEL,
                            kind=KIND_OBJECT,
                            file_path=file_path,
                            line_number=object_line,
                        )
                    )
                    logger.debug(
                        "Found constant %s in file %s at line %d",
                        object_name,
                        file_path,
                        object_line,
                    )
                object_name = ""
            continue

        if block_depth != 0 or not _is_declaration(trimmed):
            continue
        if any(marker in trimmed for marker in FUNCTION_MARKERS):
            continue

        name = _declared_name(trimmed)
        value = _declared_value(trimmed)
        records.append(
            ConstantRecord(
                name=name,
                value=value,
                kind=_classify(trimmed, value),
                file_path=file_path,
                line_number=line_number,
            )
        )
        logger.debug("Found constant %s in file %s at line %d", name, file_path, line_number)

    return records


def _is_declaration(trimmed: str) -> bool:
    return trimmed.startswith(CONST_PREFIX) or trimmed.startswith(EXPORT_CONST_PREFIX)


def _declared_name(trimmed: str) -> str:
    parts = trimmed.split()
    position = 2 if trimmed.startswith(EXPORT_CONST_PREFIX) else 1
    if len(parts) <= position:
        return ""
    return NAME_TERMINATORS.split(parts[position], maxsplit=1)[0].strip()


def _declared_value(trimmed: str) -> str:
    if "=" not in trimmed:
        return ""
    value = trimmed.split("=", 1)[1].strip()
    return value.removesuffix(";").rstrip()


def _type_annotation(trimmed: str) -> str | None:
    head = trimmed.split("=", 1)[0]
    if ":" not in head:
        return None
    annotation = head.split(":", 1)[1].strip()
    return annotation.removesuffix(";").rstrip()


def _classify(trimmed: str, value: str) -> str:
    annotation = _type_annotation(trimmed)
    if annotation is not None:
        return annotation
    if value.startswith(("\"", "'")):
        return KIND_STRING
    if value.startswith("{"):
        return KIND_OBJECT
    if value.startswith("["):
        return KIND_ARRAY
    if value in ("true", "false"):
        return KIND_BOOLEAN
    if NUMBER_PREFIX.match(value):
        return KIND_NUMBER
    return KIND_UNKNOWN
