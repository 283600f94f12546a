import asyncio
import json

from memory.food_catalog import JsonFoodCatalog


def search(catalog, name):
    return [food.id for food in asyncio.run(catalog.search_foods(name))]


def test_catalog_loads_bundled_foods(food_catalog):
    assert food_catalog.size == 10


def test_exact_match_any_language(food_catalog):
    assert search(food_catalog, "Görög joghurt") == ["food_004"]
    assert search(food_catalog, "piept de pui") == ["food_001"]
    assert search(food_catalog, "salmon") == ["food_007"]


def test_partial_match_is_word_bounded(food_catalog):
    assert search(food_catalog, "Csirkemell filé") == ["food_001"]
    assert search(food_catalog, "Tejföl") == []


def test_no_match(food_catalog):
    assert search(food_catalog, "Quorn") == []
    assert search(food_catalog, "") == []


def test_missing_file_is_empty(tmp_path):
    catalog = JsonFoodCatalog(str(tmp_path / "missing.json"))

    assert catalog.size == 0
    assert search(catalog, "Rizs") == []


def test_bare_list_and_invalid_entries(tmp_path):
    path = tmp_path / "foods.json"
    path.write_text(json.dumps([
        {"id": "f1", "name": "Alma", "aliases": ["mere"]},
        {"name": "no id"},
        {"id": "f2", "name": "Körte", "calories_per_100g": 5000},
    ]), encoding="utf-8")
    catalog = JsonFoodCatalog(str(path))

    assert catalog.size == 1
    assert search(catalog, "mere") == ["f1"]


def test_lookups_do_not_mutate(food_catalog):
    before = [food.model_dump() for food in food_catalog.foods]
    search(food_catalog, "Rizs")
    assert [food.model_dump() for food in food_catalog.foods] == before


def test_invalid_json_is_empty(tmp_path):
    path = tmp_path / "foods.json"
    path.write_text("{not json", encoding="utf-8")
    catalog = JsonFoodCatalog(str(path))

    assert catalog.size == 0
    assert search(catalog, "Rizs") == []


def test_non_list_payload_is_empty(tmp_path):
    path = tmp_path / "foods.json"
    path.write_text(json.dumps({"foods": "Rizs"}), encoding="utf-8")

    assert JsonFoodCatalog(str(path)).size == 0
