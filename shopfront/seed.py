"""Populate the category table with generated names.

Example:
    Seed the configured database with the default 100 categories:
        $ shopfront-seed

    Or import and use programmatically:
        from shopfront.seed import seed_categories
        seed_categories(session, count=100)
"""

import argparse
import logging
import random
from typing import List, Optional

from sqlmodel import Session, func, select

from .models import Category

logger = logging.getLogger(__name__)

DEFAULT_NUM_CATEGORIES = 100
BATCH_SIZE = 20

# Name pools, one per flavour of category
DEPARTMENTS = [
    "books", "movies", "music", "games", "electronics", "computers", "home",
    "garden", "tools", "grocery", "health", "beauty", "toys", "kids", "baby",
    "clothing", "shoes", "jewelry", "sports", "outdoors", "automotive",
    "industrial",
]
COLORS = [
    "red", "orange", "yellow", "green", "blue", "indigo", "violet", "teal",
    "maroon", "olive", "ivory", "lavender", "turquoise", "salmon", "plum",
]
GENRES = [
    "jazz", "blues", "rock", "pop", "folk", "reggae", "hip hop", "classical",
    "country", "electronic", "soul", "latin", "metal",
]
VEHICLES = ["sedan", "coupe", "convertible", "minivan", "wagon", "hatchback", "cargo van", "crew cab pickup"]
ANIMALS = ["cat", "dog", "bird", "fish", "horse", "rabbit", "insect", "crocodilia", "lion", "bear", "cetacean"]
SPICES = ["cumin", "paprika", "saffron", "nutmeg", "cardamom", "turmeric", "oregano", "sumac", "anise", "fennel"]
ELEMENTS = ["hydrogen", "helium", "lithium", "carbon", "nitrogen", "oxygen", "neon", "sodium", "silicon", "argon"]
ADJECTIVES = [
    "handmade", "vintage", "refined", "rustic", "sleek", "ergonomic",
    "luxurious", "organic", "recycled", "modern", "elegant", "practical",
]
PRODUCTS = ["chair", "table", "lamp", "shirt", "gloves", "hat", "towels", "bacon", "cheese", "bike", "ball", "keyboard"]

POOLS = [DEPARTMENTS, COLORS, GENRES, VEHICLES, ANIMALS, SPICES, ELEMENTS]


def format_name(raw: str) -> str:
    return " ".join(word[:1].upper() + word[1:].lower() for word in raw.split(" "))


def candidate_names() -> List[str]:
    """Every distinct formatted name the generator can produce."""
    names = {format_name(word) for pool in POOLS for word in pool}
    names.update(format_name(f"{adjective} {product}") for adjective in ADJECTIVES for product in PRODUCTS)
    return sorted(name for name in names if len(name) > 2)


def generate_category_names(count: int = DEFAULT_NUM_CATEGORIES, seed: Optional[int] = None) -> List[str]:
    """Pick ``count`` unique, title-cased category names.

    Raises:
        ValueError: If count is not positive or exceeds the available names.
    """
    names = candidate_names()
    if count <= 0:
        raise ValueError("count must be positive")
    if count > len(names):
        raise ValueError(f"count must be at most {len(names)}")

    rng = random.Random(seed)
    return rng.sample(names, count)


def seed_categories(db: Session, count: int = DEFAULT_NUM_CATEGORIES, seed: Optional[int] = None) -> int:
    """Replace all categories with ``count`` generated ones.

    Interest links pointing at the old categories are removed with them.
    Returns the number of categories stored.
    """
    names = generate_category_names(count, seed)

    for category in db.exec(select(Category)).all():
        db.delete(category)
    db.commit()
    logger.info("Cleared existing categories")

    for start in range(0, len(names), BATCH_SIZE):
        batch = names[start:start + BATCH_SIZE]
        db.add_all([Category(name=name) for name in batch])
        db.commit()
        logger.info(f"Inserted categories {start + 1}-{start + len(batch)}")

    total = db.exec(select(func.count()).select_from(Category)).one()
    logger.info(f"Successfully seeded {total} categories")
    return total


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``shopfront-seed`` command."""
    parser = argparse.ArgumentParser(description="Seed the category table")
    parser.add_argument("--count", type=int, default=DEFAULT_NUM_CATEGORIES, help="number of categories")
    parser.add_argument("--seed", type=int, default=None, help="random seed for reproducible names")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)

    from .database import engine, init_db

    init_db()
    with Session(engine) as db:
        seed_categories(db, count=args.count, seed=args.seed)


if __name__ == "__main__":
    main()
