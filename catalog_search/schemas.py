import json
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any

# Fields stored as JSON strings in the search backend's flat metadata
_NESTED_FIELDS = ("inventory", "attributes", "variants")


class InventoryEntry(BaseModel):
    sku: str
    quantity: int
    price: str
    discount_price: Optional[str] = None


class IndexItem(BaseModel):
    """Language-specific projection of a product sent to the search index."""
    id: int
    store: str
    language: str
    name: str
    description: Optional[str] = None
    link: Optional[str] = None
    inventory: List[InventoryEntry] = Field(default_factory=list)
    brand: Optional[str] = None
    category: Optional[str] = None
    attributes: Optional[Dict[str, str]] = None
    image: Optional[str] = None
    reviews: Optional[str] = None
    variants: Optional[List[Dict[str, str]]] = None
    keywords: List[str] = Field(default_factory=list)

    def to_metadata(self) -> Dict[str, Any]:
        """Flatten into string/number/list-of-string values, dropping empty fields."""
        data = self.model_dump(exclude_none=True)
        for key in _NESTED_FIELDS:
            if key in data:
                data[key] = json.dumps(data[key], ensure_ascii=False)
        return data

    @classmethod
    def from_metadata(cls, metadata: Dict[str, Any]) -> "IndexItem":
        data = dict(metadata)
        for key in _NESTED_FIELDS:
            if isinstance(data.get(key), str):
                data[key] = json.loads(data[key])
        # Backends may hand numeric ids back as floats
        data["id"] = int(data["id"])
        return cls(**data)


class IndexResult(BaseModel):
    product_id: int
    store: str
    action: str  # "indexed" | "deleted" | "skipped"
    languages: List[str] = Field(default_factory=list)


class SearchRequest(BaseModel):
    query: str
    language: str = "en"
    store: str = ""
    start: int = Field(0, ge=0)
    count: int = Field(20, ge=1, le=100)


class SearchHit(BaseModel):
    id: int
    name: str
    score: float
    brand: Optional[str] = None
    category: Optional[str] = None
    image: Optional[str] = None
    price: Optional[str] = None
    link: Optional[str] = None


class SearchResponse(BaseModel):
    # Matches pulled from the backend for this page (start + count at most),
    # not the overall number of hits
    fetched: int = 0
    results: List[SearchHit] = Field(default_factory=list)


class KeywordRequest(BaseModel):
    query: str
    language: str = "en"
    store: str = ""
    count: int = Field(10, ge=1, le=50)


class KeywordResponse(BaseModel):
    keywords: List[str] = Field(default_factory=list)
