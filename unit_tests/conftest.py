import pytest
import sys
from pathlib import Path

# Add root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from memory.food_catalog import JsonFoodCatalog

CATALOG_PATH = Path(__file__).parent.parent / "data" / "food_catalog.json"

HU_PLAN = """Név: Kiss Anna
Kor: 34 év
Testsúly: 68 kg
Magasság: 170 cm
Cél: fogyás

1. hét
Hétfő
Reggeli
Zabpehely 60g + Tej 200ml
Ebéd
Csirkemell 150g
Rizs 100g
Vacsora
Túró 200g
Kedd
Reggeli
Görög joghurt 250g + Dió 40g
"""

SCENARIOS = {
    "A": "2. hét\nKedd\nReggeli\nGörög joghurt 250g + Dió 40g",
    "B": "Hello world, this is unrelated text.",
    "C": "Saptamana 1\nLuni\nMic dejun\n3kj$$$garbage###",
}


@pytest.fixture
def hu_plan_text():
    return HU_PLAN


@pytest.fixture
def scenarios():
    return dict(SCENARIOS)


@pytest.fixture
def food_catalog():
    return JsonFoodCatalog(str(CATALOG_PATH))
