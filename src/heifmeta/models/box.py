"""Box inventory models."""

from pydantic import BaseModel


class BoxInfo(BaseModel):
    """One entry of the box inventory recorded during a walk."""

    type: str
    size: int
    offset: int
    depth: int = 0
    header_size: int = 8

    @property
    def extends_to_end(self) -> bool:
        """True for a box whose size field was the zero sentinel."""
        return self.size == 0
