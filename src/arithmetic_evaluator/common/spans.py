"""Source positions attached to tokens, tree nodes and errors."""
from pydantic import BaseModel, ConfigDict, Field, model_validator


class Span(BaseModel):
    """
    Half-open range ``[start, end)`` of character offsets into the input text.

    Used to underline the offending part of an expression when reporting errors.
    """

    model_config = ConfigDict(frozen=True)

    start: int = Field(..., ge=0, description="Offset of the first covered character")
    end: int = Field(..., ge=0, description="Offset one past the last covered character")

    @model_validator(mode="after")
    def end_not_before_start(self) -> "Span":
        """Ensure the span is not reversed."""
        if self.end < self.start:
            raise ValueError(f"Span end ({self.end}) is before its start ({self.start})")
        return self

    def __len__(self) -> int:
        return self.end - self.start

    def join(self, other: "Span") -> "Span":
        """
        Return the smallest span covering both spans.

        :param Span other: Span to merge with

        :return: Covering span
        :rtype: Span
        """
        return Span(start=min(self.start, other.start), end=max(self.end, other.end))

    def slice(self, text: str) -> str:
        """Return the part of ``text`` covered by this span."""
        return text[self.start : self.end]
