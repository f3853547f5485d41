"""Domain initialization discovers every element without explicit imports."""

import json
import os
import subprocess
import sys
from pathlib import Path

from storefront.domain import storefront

PROJECT_ROOT = Path(__file__).parents[3]

AGGREGATES = {"Category", "Order", "Product", "Review", "User", "UserInteraction"}


def _names(records):
    return {record.name for record in records.values()}


class TestRegisteredElements:
    def test_all_aggregates_registered(self):
        assert AGGREGATES <= _names(storefront.registry.aggregates)

    def test_commands_and_handlers_registered(self):
        commands = _names(storefront.registry.commands)
        handlers = _names(storefront.registry.command_handlers)

        assert {"CreateCategory", "CreateProduct", "PlaceOrder", "SubmitReview", "RegisterUser"} <= commands
        assert {"RecordInteraction", "DeleteUser", "RecalculateProductRating"} <= commands
        assert {"ManageCategoryHandler", "PlaceOrderHandler", "RegisterUserHandler"} <= handlers

    def test_repositories_registered(self):
        assert {
            "CategoryRepository",
            "OrderRepository",
            "ProductRepository",
            "ReviewRepository",
            "UserRepository",
            "UserInteractionRepository",
        } <= _names(storefront.registry.repositories)


class TestFreshInitialization:
    def test_init_alone_registers_aggregates(self):
        """A new interpreter that only imports the domain module still finds every aggregate."""
        script = (
            "import json\n"
            "from storefront.domain import storefront\n"
            "storefront.init()\n"
            "print(json.dumps(sorted(r.name for r in storefront.registry.aggregates.values())))\n"
        )
        env = dict(os.environ, PYTHONPATH=str(PROJECT_ROOT / "src"), PROTEAN_ENV="test")
        result = subprocess.run(
            [sys.executable, "-c", script],
            cwd=PROJECT_ROOT,
            env=env,
            capture_output=True,
            text=True,
            check=True,
        )

        registered = set(json.loads(result.stdout.strip().splitlines()[-1]))
        assert AGGREGATES <= registered
