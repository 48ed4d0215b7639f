"""Typed access to parsed query and form parameters.

Values are only available through the getters. Conversion failures never raise:
the getter returns its default and records the failure in the form's error
slot, which the caller inspects with ``Form.err()``. Only the most recent
failure is kept.
"""

import math
import re
from collections.abc import Callable, Mapping, MutableSequence, Sequence
from typing import Any

from safehttp.core.logger import LogIcon, logger
from safehttp.core.settings import settings as st
from safehttp.models.core import FileHeader, SliceKind

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1
UINT64_MAX = (1 << 64) - 1
INT64_DIGITS = len(str(INT64_MAX))
UINT64_DIGITS = len(str(UINT64_MAX))

INVALID_SYNTAX = "invalid syntax"
OUT_OF_RANGE = "value out of range"

_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT_RE = re.compile(r"[0-9]+")
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_HEX_FLOAT_RE = re.compile(r"[+-]?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)[pP][+-]?[0-9]+")
_SPECIAL_FLOAT_RE = re.compile(r"[+-]?inf(?:inity)?|nan", re.IGNORECASE)


class FormError(Exception):
    """Base class for errors recorded while reading form values."""


class ConversionError(FormError):
    """A form value could not be converted to the requested type."""

    def __init__(self, func: str, value: str, reason: str, message: str | None = None) -> None:
        self.func = func
        self.value = value
        self.reason = reason
        super().__init__(message or f"{func}: parsing {value!r}: {reason}")


class UnsupportedTypeError(FormError):
    """A slice destination or element kind the form cannot fill."""

    def __init__(self, target: Any) -> None:
        self.target = target
        super().__init__(f"type not supported in slice call: {target!r}")


def parse_int64(value: str, param_key: str) -> int:
    if not _INT_RE.fullmatch(value):
        raise ConversionError("ParseInt", value, INVALID_SYNTAX)
    # Bounded before int(): long digit strings exceed the interpreter's conversion limit.
    digits = value.lstrip("+-").lstrip("0")
    if len(digits) > INT64_DIGITS:
        raise ConversionError("ParseInt", value, OUT_OF_RANGE)
    result = int(digits or "0")
    if value.startswith("-"):
        result = -result
    if not INT64_MIN <= result <= INT64_MAX:
        raise ConversionError("ParseInt", value, OUT_OF_RANGE)
    return result


def parse_uint64(value: str, param_key: str) -> int:
    if not _UINT_RE.fullmatch(value):
        raise ConversionError("ParseUint", value, INVALID_SYNTAX)
    digits = value.lstrip("0")
    if len(digits) > UINT64_DIGITS:
        raise ConversionError("ParseUint", value, OUT_OF_RANGE)
    result = int(digits or "0")
    if result > UINT64_MAX:
        raise ConversionError("ParseUint", value, OUT_OF_RANGE)
    return result


def parse_float64(value: str, param_key: str) -> float:
    """Parse a decimal or hexadecimal float; finite literals must fit in 64 bits."""
    if _SPECIAL_FLOAT_RE.fullmatch(value):
        return float(value)
    if _HEX_FLOAT_RE.fullmatch(value):
        try:
            return float.fromhex(value)
        except OverflowError:
            raise ConversionError("ParseFloat", value, OUT_OF_RANGE) from None
    if not _FLOAT_RE.fullmatch(value):
        raise ConversionError("ParseFloat", value, INVALID_SYNTAX)
    result = float(value)
    if math.isinf(result):
        raise ConversionError("ParseFloat", value, OUT_OF_RANGE)
    return result


def parse_bool(value: str, param_key: str) -> bool:
    """Accept only the literal tokens ``true`` and ``false``."""
    match value:
        case "true":
            return True
        case "false":
            return False
        case _:
            raise ConversionError(
                "ParseBool", value, INVALID_SYNTAX, f"values of form parameter {param_key!r} not a boolean"
            )


def parse_string(value: str, param_key: str) -> str:
    return value


CONVERTERS: dict[SliceKind, Callable[[str, str], Any]] = {
    SliceKind.STRING: parse_string,
    SliceKind.INT64: parse_int64,
    SliceKind.UINT64: parse_uint64,
    SliceKind.FLOAT64: parse_float64,
    SliceKind.BOOL: parse_bool,
}


def resolve_kind(kind: Any) -> SliceKind | None:
    """Map a kind (member or its string value) to a ``SliceKind``, or ``None`` when unsupported."""
    try:
        return SliceKind(kind)
    except (ValueError, TypeError):
        return None


def clear_slice(dest: Any, kind: Any) -> UnsupportedTypeError | None:
    """Clear ``dest`` and report whether the destination and kind are supported."""
    if not isinstance(dest, MutableSequence):
        return UnsupportedTypeError(type(dest))
    dest.clear()
    if resolve_kind(kind) is None:
        return UnsupportedTypeError(kind)
    return None


class Form:
    """Parsed data from the URL query or from the body of a non-multipart POST, PUT or PATCH request.

    Scalar getters return the first value of a key. A key whose value cannot be
    converted yields the default and sets the error slot. Absent keys yield the
    default and leave the error slot alone.

    A Form is owned by a single request handler and is not safe for concurrent use.
    """

    __slots__ = ("_values", "_err")

    def __init__(self, values: Mapping[str, Sequence[str]] | None = None) -> None:
        self._values: dict[str, list[str]] = {key: list(vals) for key, vals in (values or {}).items() if vals}
        self._err: FormError | None = None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(keys={list(self._values)}, err={self._err!r})"

    def _record(self, param_key: str, err: FormError) -> None:
        self._err = err
        if isinstance(err, UnsupportedTypeError):
            logger.warning("Unsupported slice destination", icon=LogIcon.VALIDATION, key=param_key, error=str(err))
        elif st.LOG_FORM_ERRORS:
            logger.debug("Form value conversion failed", icon=LogIcon.VALIDATION, key=param_key, error=str(err))

    def _first(self, param_key: str, default_value: Any, parse: Callable[[str, str], Any]) -> Any:
        vals = self._values.get(param_key)
        if vals is None:
            return default_value
        try:
            return parse(vals[0], param_key)
        except ConversionError as err:
            self._record(param_key, err)
            return default_value

    def int64(self, param_key: str, default_value: int) -> int:
        """First value of ``param_key`` as a signed 64-bit integer, or ``default_value``."""
        return self._first(param_key, default_value, parse_int64)

    def uint64(self, param_key: str, default_value: int) -> int:
        """First value of ``param_key`` as an unsigned 64-bit integer, or ``default_value``."""
        return self._first(param_key, default_value, parse_uint64)

    def float64(self, param_key: str, default_value: float) -> float:
        """First value of ``param_key`` as a float, or ``default_value``."""
        return self._first(param_key, default_value, parse_float64)

    def string(self, param_key: str, default_value: str) -> str:
        """First value of ``param_key``, or ``default_value`` when absent. Never fails."""
        return self._first(param_key, default_value, parse_string)

    def slice(self, dest: MutableSequence[Any], param_key: str, kind: SliceKind | str) -> None:
        """Fill ``dest`` in place with every value of ``param_key`` converted to ``kind``.

        An absent key clears ``dest`` and overwrites the error slot with the result
        of clearing, so a previous error is reset unless ``dest`` or ``kind`` is
        unsupported. A conversion failure clears ``dest``, records the error and
        stops; partial results are discarded.
        """
        vals = self._values.get(param_key)
        if vals is None:
            if (err := clear_slice(dest, kind)) is not None:
                self._record(param_key, err)
            else:
                self._err = None
            return

        resolved = resolve_kind(kind)
        if resolved is None or not isinstance(dest, MutableSequence):
            self._record(param_key, clear_slice(dest, kind))  # type: ignore[arg-type]
            return

        parse = CONVERTERS[resolved]
        res = []
        for val in vals:
            try:
                res.append(parse(val, param_key))
            except ConversionError as err:
                dest.clear()
                self._record(param_key, err)
                return
        dest.clear()
        dest.extend(res)

    def err(self) -> FormError | None:
        """Last error recorded while reading form values, ``None`` if there was none."""
        return self._err

    # Keep last: annotations after this def would resolve ``bool`` to the method.
    def bool(self, param_key: str, default_value: bool) -> bool:
        """First value of ``param_key`` as a boolean.

        Only ``"true"`` and ``"false"`` are accepted. Any other value sets the
        error slot and returns ``False``, whatever ``default_value`` is.
        """
        vals = self._values.get(param_key)
        if vals is None:
            return default_value
        try:
            return parse_bool(vals[0], param_key)
        except ConversionError as err:
            self._record(param_key, err)
            return False


class MultipartForm(Form):
    """Form of a multipart/form-data POST, PUT or PATCH request.

    Holds the file part headers of the request alongside the form values.
    """

    __slots__ = ("_files",)

    def __init__(
        self,
        values: Mapping[str, Sequence[str]] | None = None,
        files: Mapping[str, Sequence[FileHeader]] | None = None,
    ) -> None:
        super().__init__(values)
        self._files: dict[str, list[FileHeader]] = {name: list(parts) for name, parts in (files or {}).items()}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(keys={list(self._values)}, files={list(self._files)}, err={self._err!r})"
