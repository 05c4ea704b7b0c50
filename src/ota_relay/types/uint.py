"""Fixed-width unsigned integers used on the wire."""

from __future__ import annotations

from typing import Any, ClassVar, Literal, SupportsIndex, SupportsInt

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema
from typing_extensions import Self


class BaseUint(int):
    """A base class for fixed-width unsigned integers used on the wire."""

    BITS: ClassVar[int]
    """The number of bits in the integer (overridden by subclasses)."""

    def __new__(cls, value: SupportsInt) -> Self:
        """
        Create and validate a new Uint instance.

        Raises:
            OverflowError: If `value` is outside the allowed range [0, 2**BITS - 1].
        """
        int_value = int(value)
        if not (0 <= int_value < (2**cls.BITS)):
            raise OverflowError(f"{int_value} is out of range for {cls.__name__}")
        return super().__new__(cls, int_value)

    @classmethod
    def max_value(cls) -> Self:
        """Largest representable value (2**BITS - 1)."""
        return cls(2**cls.BITS - 1)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """Hook into Pydantic's validation system."""

        def validate(value: Any) -> BaseUint:
            """Pydantic validation function that calls the class constructor."""
            # bool is an int subclass; never accept it as a counter or length.
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Expected int for {cls.__name__}, got {type(value).__name__}")
            try:
                return cls(value)
            except OverflowError as e:
                raise ValueError(str(e)) from e

        return core_schema.json_or_python_schema(
            json_schema=core_schema.int_schema(ge=0, lt=2**cls.BITS),
            python_schema=core_schema.no_info_plain_validator_function(validate),
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda instance: int(instance)
            ),
        )

    def to_bytes(
        self,
        length: SupportsIndex | None = None,
        byteorder: Literal["little", "big"] = "big",
        *,
        signed: bool = False,
    ) -> bytes:
        """
        Return an array of bytes representing the integer.

        Defaults to network byte order and a fixed length based on `BITS`.
        """
        actual_length = self.BITS // 8 if length is None else int(length)
        return super().to_bytes(length=actual_length, byteorder=byteorder, signed=signed)

    @classmethod
    def decode_bytes(cls, data: bytes) -> Self:
        """Parse exactly `BITS // 8` big-endian bytes."""
        if len(data) != cls.BITS // 8:
            raise ValueError(
                f"{cls.__name__} expects exactly {cls.BITS // 8} bytes, got {len(data)}"
            )
        return cls(int.from_bytes(data, "big"))

    def wrapping_increment(self) -> Self:
        """Return `self + 1`, wrapping to zero past the maximum value."""
        return type(self)((int(self) + 1) % (2**self.BITS))

    def _raise_type_error(self, other: Any, op_symbol: str) -> None:
        """Helper to raise a consistent TypeError."""
        raise TypeError(
            f"Unsupported operand type(s) for {op_symbol}: "
            f"'{type(self).__name__}' and '{type(other).__name__}'"
        )

    def __add__(self, other: Any) -> Self:
        """Handle the addition operator (`+`)."""
        if not isinstance(other, type(self)):
            self._raise_type_error(other, "+")
        return type(self)(super().__add__(other))

    def __eq__(self, other: object) -> bool:
        """Compare by value against other ints of the same type or plain ints."""
        if isinstance(other, BaseUint) and not isinstance(other, type(self)):
            self._raise_type_error(other, "==")
        return super().__eq__(other)

    def __ne__(self, other: object) -> bool:
        """Handle the inequality operator (`!=`)."""
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    def __repr__(self) -> str:
        """Return the official string representation of the object."""
        return f"{type(self).__name__}({int(self)})"

    def __str__(self) -> str:
        """Return the informal, user-friendly string representation."""
        return str(int(self))

    def __hash__(self) -> int:
        """Hash like the plain int so mixed-type equality stays consistent."""
        return hash(int(self))


class Uint16(BaseUint):
    """A 16-bit unsigned integer (chunk payload length)."""

    BITS = 16


class Uint32(BaseUint):
    """A 32-bit unsigned integer (chunk counter)."""

    BITS = 32
