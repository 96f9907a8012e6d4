from collections import OrderedDict
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..errors import NotFoundError
from ..models import Brand, BrandStore, City, Mall
from ..schemas.map import CompareBrand, CompareLocation, CompareQuery

# Score for a store whose brand has no explicit score, keyed by brand category.
CATEGORY_SCORES = {"1": 10.0, "2": 5.0}


def store_score(brand_score: Optional[float], category: Optional[str]) -> float:
    """Explicit brand score when set and nonzero, otherwise the category fallback."""
    if brand_score:
        return float(brand_score)
    return CATEGORY_SCORES.get(str(category) if category is not None else "", 0.0)


def _locations(db: Session, query: CompareQuery) -> "OrderedDict[int, str]":
    model = Mall if query.type == "mall" else City
    found = {row.id: row.name for row in db.execute(select(model.id, model.name).where(model.id.in_(query.ids)))}
    missing = [location_id for location_id in query.ids if location_id not in found]
    if missing:
        raise NotFoundError(f"{query.type.capitalize()} not found: {missing}")
    return OrderedDict((location_id, found[location_id]) for location_id in query.ids)


def compare_locations(db: Session, query: CompareQuery) -> List[CompareLocation]:
    """Brand rosters and scores for several malls or cities, best first."""
    locations = _locations(db, query)
    location_column = BrandStore.mall_id if query.type == "mall" else BrandStore.city_id

    statement = (
        select(location_column, Brand.id, Brand.name, Brand.category, Brand.score)
        .join(Brand, Brand.id == BrandStore.brand_id)
        .where(location_column.in_(list(locations)), BrandStore.is_active.is_(True))
        .order_by(Brand.name, Brand.id)
    )
    if query.brand_ids:
        statement = statement.where(BrandStore.brand_id.in_(query.brand_ids))

    rosters: Dict[int, "OrderedDict[int, dict]"] = {location_id: OrderedDict() for location_id in locations}
    for location_id, brand_id, name, category, score in db.execute(statement).all():
        entry = rosters[location_id].setdefault(
            brand_id, {"name": name, "category": category, "stores": 0, "score": 0.0}
        )
        entry["stores"] += 1
        entry["score"] += store_score(score, category)

    results = []
    for location_id, name in locations.items():
        brands = [
            CompareBrand(
                brand_id=brand_id,
                name=entry["name"],
                category=entry["category"],
                store_count=entry["stores"],
                average_score=round(entry["score"] / entry["stores"], 2),
            )
            for brand_id, entry in rosters[location_id].items()
        ]
        store_count = sum(entry["stores"] for entry in rosters[location_id].values())
        total_score = sum(entry["score"] for entry in rosters[location_id].values())
        results.append(
            CompareLocation(
                id=location_id,
                name=name,
                type=query.type,
                store_count=store_count,
                brand_count=len(brands),
                total_score=round(total_score, 2),
                average_score=round(total_score / store_count, 2) if store_count else 0,
                brands=brands,
            )
        )

    results.sort(key=lambda item: item.total_score, reverse=True)
    for rank, item in enumerate(results, start=1):
        item.rank = rank
    return results
