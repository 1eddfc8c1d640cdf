"""
Pydantic models for search requests and JSON output.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from template_kb.document import Category, Ecosystem, TemplateEntry


class SearchRequest(BaseModel):
    query: str = ""
    top_k: int = Field(default=3, ge=1)
    category: Optional[Category] = None
    ecosystem: Optional[Ecosystem] = None


class CodeBlockModel(BaseModel):
    language: Optional[str] = None
    code: str


class EntryModel(BaseModel):
    id: str = Field(..., min_length=1)
    category: Category
    ecosystem: Ecosystem
    title: str = Field(..., min_length=1)
    body: str
    code_blocks: list[CodeBlockModel] = Field(default_factory=list)

    @classmethod
    def from_entry(cls, entry: TemplateEntry) -> "EntryModel":
        return cls(
            id=entry.id,
            category=entry.category,
            ecosystem=entry.ecosystem,
            title=entry.title,
            body=entry.body,
            code_blocks=[
                CodeBlockModel(language=b.language, code=b.code)
                for b in entry.code_blocks
            ],
        )


class SearchHit(EntryModel):
    score: int = Field(..., ge=1)

    @classmethod
    def from_scored(cls, entry: TemplateEntry, score: int) -> "SearchHit":
        return cls(**EntryModel.from_entry(entry).model_dump(), score=score)


class SearchResponse(BaseModel):
    query: str
    top_k: int = Field(..., ge=1)
    hits: list[SearchHit] = Field(default_factory=list)
