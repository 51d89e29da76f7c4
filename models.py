from typing import List, Literal, Union

from pydantic import BaseModel, Field


class Verse(BaseModel):
    shlok_no: int
    shlok: str


class ChapterResult(BaseModel):
    chapterData: List[Verse]
    fullText: str


class ChapterError(BaseModel):
    error: Literal[True] = True
    message: str
    chapterData: List[Verse] = []
    fullText: str = ""
    # failure cause for callers and tests; not part of the JSON payload
    reason: str = Field(default="unexpected", exclude=True)


LoadResult = Union[ChapterResult, ChapterError]
