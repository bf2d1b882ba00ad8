"""
Catalog loading from JSON and CSV exports
"""

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Iterable, List, Union

import pandas as pd
import pydantic
from loguru import logger

from .exceptions import CatalogError
from .models import CreditCardProduct


def parse_catalog_entries(entries: Iterable[Any]) -> List[CreditCardProduct]:
    """
    Turn catalog entries into products

    Products pass through untouched; mappings are parsed. Entries that fail
    to parse are logged and dropped.

    Args:
        entries: CreditCardProduct instances or mappings of product fields

    Returns:
        Parsed products, in input order
    """
    products = []
    for position, entry in enumerate(entries):
        if isinstance(entry, CreditCardProduct):
            products.append(entry)
            continue
        if not isinstance(entry, Mapping):
            logger.warning(f"Skipping catalog entry {position}: unsupported type {type(entry).__name__}")
            continue
        try:
            products.append(CreditCardProduct(**dict(entry)))
        except pydantic.ValidationError as e:
            name = entry.get('card_name') or entry.get('id') or position
            logger.warning(f"Skipping catalog entry {name}: {e.error_count()} invalid field(s)")
            logger.debug(f"Catalog entry {name} errors: {e.errors()}")
    return products


def catalog_from_dataframe(df: pd.DataFrame, active_only: bool = True) -> List[CreditCardProduct]:
    """
    Build products from a tabular catalog export

    Args:
        df: One row per card, columns named like CreditCardProduct fields
        active_only: Drop rows whose ``is_active`` is false

    Returns:
        Parsed products
    """
    df = df.rename(columns=lambda c: str(c).strip().lower())
    records = df.to_dict(orient='records')
    products = parse_catalog_entries(records)
    if active_only:
        active = [p for p in products if p.is_active]
        if len(active) < len(products):
            logger.info(f"Dropped {len(products) - len(active)} inactive cards")
        products = active
    logger.debug(f"Parsed {len(products)} cards from {len(df)} rows")
    return products


def load_catalog(path: Union[str, Path], active_only: bool = True) -> List[CreditCardProduct]:
    """
    Load a card catalog from a .json or .csv file

    JSON files hold either a list of cards or an object with a ``cards`` list.

    Args:
        path: Catalog file
        active_only: Drop inactive cards

    Returns:
        Parsed products

    Raises:
        CatalogError: If the file is missing, unreadable or of an unknown type
    """
    catalog_path = Path(path)
    if not catalog_path.exists():
        raise CatalogError(f"Catalog file {catalog_path} does not exist")

    suffix = catalog_path.suffix.lower()
    try:
        if suffix == '.csv':
            df = pd.read_csv(catalog_path)
        elif suffix == '.json':
            with open(catalog_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if isinstance(data, Mapping):
                data = data.get('cards', [])
            if not isinstance(data, list):
                raise CatalogError(f"Catalog file {catalog_path} does not contain a list of cards")
            df = pd.DataFrame.from_records(data)
        else:
            raise CatalogError(f"Unsupported catalog format '{suffix}' for {catalog_path}")
    except CatalogError:
        raise
    except (OSError, ValueError, pd.errors.ParserError) as e:
        logger.error(f"Failed to read catalog {catalog_path}: {str(e)}")
        raise CatalogError(f"Failed to load catalog {catalog_path}: {str(e)}")

    products = catalog_from_dataframe(df, active_only=active_only)
    logger.info(f"Loaded {len(products)} cards from {catalog_path}")
    return products
