"""Tests for example content transformation."""

import re

import pytest

from examples_sync.core.transformer import ContentTransformer, transform_example_content
from examples_sync.models.config import EXCHANGE_CONFIGS


# Typical "alternative import" comments as each SDK writes them
EXCHANGE_FIXTURES: dict[str, tuple[str, str]] = {
    "binance": (
        "import { MainClient } from '../src/index';\n"
        "// or, with the npm package\n"
        "/*\n"
        "import { MainClient } from 'binance';\n"
        "*/\n"
        "\n"
        "const client = new MainClient({\n"
        "  api_key: 'key',\n"
        "});\n",
        "import { MainClient } from 'binance';\n"
        "\n"
        "const client = new MainClient({\n"
        "  api_key: 'key',\n"
        "});\n",
    ),
    "bitget": (
        "import { RestClientV2 } from '../../src/index';\n"
        "// import { RestClientV2 } from 'bitget-api';\n"
        "\n"
        "const client = new RestClientV2();\n",
        "import { RestClientV2 } from 'bitget-api';\n"
        "\n"
        "const client = new RestClientV2();\n",
    ),
    "bitmart": (
        "import { RestClient } from '../../src/index.js';\n"
        "// import from npm, after installing via npm `npm install bitmart-api`:\n"
        "// import { RestClient } from 'bitmart-api';\n"
        "\n"
        "const client = new RestClient();\n",
        "import { RestClient } from 'bitmart-api';\n"
        "\n"
        "const client = new RestClient();\n",
    ),
    "bybit": (
        "import { RestClientV5 } from '../src/index';\n"
        "// or, with the npm package\n"
        "/*\n"
        "import { RestClientV5 } from 'bybit-api';\n"
        "*/\n"
        "\n"
        "const client = new RestClientV5();\n",
        "import { RestClientV5 } from 'bybit-api';\n"
        "\n"
        "const client = new RestClientV5();\n",
    ),
    "coinbase": (
        "import { CBAdvancedTradeClient } from '../../src/index.js';\n"
        "\n"
        "/**\n"
        " * import { CBAdvancedTradeClient } from 'coinbase-api';\n"
        " */\n"
        "\n"
        "const client = new CBAdvancedTradeClient();\n",
        "import { CBAdvancedTradeClient } from 'coinbase-api';\n"
        "\n"
        "const client = new CBAdvancedTradeClient();\n",
    ),
    "gate": (
        "import { RestClient } from '../src';\n"
        "\n"
        "// For an easy demonstration, import from the src dir. Normally you would import from the npm module:\n"
        "// import { RestClient } from 'gateio-api';\n"
        "\n"
        "const client = new RestClient();\n",
        "import { RestClient } from 'gateio-api';\n"
        "\n"
        "const client = new RestClient();\n",
    ),
    "kraken": (
        "import { SpotClient } from '../../src/index.js';\n"
        "// normally you should install this module via npm: `npm install @siebly/kraken-api`\n"
        "\n"
        "// or\n"
        "// import { SpotClient } from '@siebly/kraken-api';\n"
        "\n"
        "const client = new SpotClient();\n",
        "import { SpotClient } from '@siebly/kraken-api';\n"
        "\n"
        "const client = new SpotClient();\n",
    ),
    "kucoin": (
        "import { SpotClient } from '../../src/index.ts';\n"
        "// import { SpotClient } from 'kucoin-api';\n"
        "// normally you should install this module via npm: `npm install kucoin-api`\n"
        "\n"
        "const client = new SpotClient();\n",
        "import { SpotClient } from 'kucoin-api';\n"
        "\n"
        "const client = new SpotClient();\n",
    ),
    "okx": (
        "// If you cloned the repo and want to run this example, use this import:\n"
        "import { RestClient } from '../../src/index';\n"
        "\n"
        "// or use the module installed via npm:\n"
        "// import { RestClient } from 'okx-api';\n"
        "\n"
        "/**\n"
        " * import { RestClient } from 'okx-api';\n"
        " * Replace the import above when using the published module.\n"
        " */\n"
        "\n"
        "const client = new RestClient();\n",
        "import { RestClient } from 'okx-api';\n"
        "\n"
        "const client = new RestClient();\n",
    ),
}


def _transform(exchange: str, content: str) -> str:
    return transform_example_content(content, EXCHANGE_CONFIGS[exchange].package_name, exchange)


class TestExchangeFixtures:
    """Each exchange's comment convention is fully stripped."""

    def test_every_exchange_has_a_fixture(self) -> None:
        assert set(EXCHANGE_FIXTURES) == set(EXCHANGE_CONFIGS)

    @pytest.mark.parametrize("exchange", sorted(EXCHANGE_FIXTURES))
    def test_expected_output(self, exchange: str) -> None:
        content, expected = EXCHANGE_FIXTURES[exchange]
        assert _transform(exchange, content) == expected

    @pytest.mark.parametrize("exchange", sorted(EXCHANGE_FIXTURES))
    def test_package_name_only_left_in_import(self, exchange: str) -> None:
        content, _ = EXCHANGE_FIXTURES[exchange]
        package_name = EXCHANGE_CONFIGS[exchange].package_name

        result = _transform(exchange, content)

        assert result.count(package_name) == 1
        assert f"from '{package_name}';" in result
        for line in result.splitlines():
            if package_name in line:
                assert "//" not in line and "*" not in line

    @pytest.mark.parametrize("exchange", sorted(EXCHANGE_FIXTURES))
    def test_idempotent(self, exchange: str) -> None:
        content, _ = EXCHANGE_FIXTURES[exchange]

        once = _transform(exchange, content)
        twice = _transform(exchange, once)

        assert twice == once


class TestImportRewrite:
    """Tests for relative src import rewriting."""

    def test_spec_example(self) -> None:
        content = "import { Foo } from '../../../src';\n// from 'foo-pkg';\n"

        result = transform_example_content(content, "foo-pkg", "binance")

        assert "import { Foo } from 'foo-pkg';" in result
        assert "// from 'foo-pkg';" not in result

    def test_spec_example_unknown_exchange(self) -> None:
        content = "import { Foo } from '../../../src';\n// from 'foo-pkg';\n\nfoo();\n"

        result = transform_example_content(content, "foo-pkg", "acme")

        assert "import { Foo } from 'foo-pkg';" in result
        assert "// from 'foo-pkg';" not in result
        assert "foo();" in result

    @pytest.mark.parametrize("source", [
        "'../src'",
        "'../../src'",
        '"../../src/index"',
        "'../src/types/shared'",
    ])
    def test_rewrites_src_variants(self, source: str) -> None:
        content = f"import {{ RestClient }} from {source};\n"

        result = transform_example_content(content, "bybit-api", "bybit")

        assert result == "import { RestClient } from 'bybit-api';\n"

    @pytest.mark.parametrize("exchange", ["okx", "kraken", "gate", "bitget", "bitmart", "bybit", "coinbase"])
    def test_rewrites_js_suffix(self, exchange: str) -> None:
        package_name = EXCHANGE_CONFIGS[exchange].package_name
        content = "import { X } from '../src.js';\nimport { Y } from '../../src/index.js';\n"

        result = transform_example_content(content, package_name, exchange)

        assert result == f"import {{ X }} from '{package_name}';\nimport {{ Y }} from '{package_name}';\n"

    def test_kucoin_rewrites_ts_suffix(self) -> None:
        content = "import { SpotClient } from '../src/index.ts';\n"

        result = transform_example_content(content, "kucoin-api", "kucoin")

        assert result == "import { SpotClient } from 'kucoin-api';\n"

    @pytest.mark.parametrize("exchange", sorted(EXCHANGE_CONFIGS))
    def test_other_imports_untouched(self, exchange: str) -> None:
        package_name = EXCHANGE_CONFIGS[exchange].package_name
        content = (
            "import axios from 'axios';\n"
            "import { logger } from './logger';\n"
            "import { helper } from '../utils/helper';\n"
            "import { thing } from '../srcs/thing';\n"
            "\n"
            "logger.info(helper(thing));\n"
        )

        assert transform_example_content(content, package_name, exchange) == content

    def test_scoped_package_replacement_is_literal(self) -> None:
        content = "import { SpotClient } from '../src/index.js';\n"

        result = transform_example_content(content, "@siebly/kraken-api", "kraken")

        assert result == "import { SpotClient } from '@siebly/kraken-api';\n"

    def test_package_name_with_regex_characters(self) -> None:
        # "." must not match any character
        content = "import { A } from '../src';\n// from 'pkg.js';\n// from 'pkgXjs';\n"

        result = transform_example_content(content, "pkg.js", "acme")

        assert "// from 'pkg.js';" not in result
        assert "// from 'pkgXjs';" in result


class TestCommentStripping:
    """Tests for individual comment removal steps."""

    def test_or_block_removed_without_package_name(self) -> None:
        content = (
            "import { RestClient } from '../src';\n"
            "\n"
            "// or\n"
            "// const { RestClient } = require('anything');\n"
            "\n"
            "run();\n"
        )

        result = transform_example_content(content, "bitget-api", "bitget")

        assert result == "import { RestClient } from 'bitget-api';\n\nrun();\n"

    def test_unrelated_comments_kept(self) -> None:
        content = (
            "import { RestClient } from '../src';\n"
            "\n"
            "// Place a limit order\n"
            "const order = await client.submitOrder();\n"
        )

        result = transform_example_content(content, "bybit-api", "bybit")

        assert "// Place a limit order" in result

    def test_okx_cloned_repo_block(self) -> None:
        content = (
            "const a = 1;\n"
            "// If you cloned the repo and are using typescript, you can import from src directly:\n"
            "// or use the module installed via npm:\n"
            "// const { RestClient } = require('okx-api');\n"
            "\n"
            "run();\n"
        )

        result = transform_example_content(content, "okx-api", "okx")

        assert "If you cloned" not in result
        assert "okx-api" not in result
        assert result.startswith("const a = 1;\n")
        assert "run();" in result

    def test_kraken_doc_block(self) -> None:
        content = (
            "import { SpotClient } from '../src/index.js';\n"
            "\n"
            "/**\n"
            " * import { SpotClient } from '@siebly/kraken-api';\n"
            " */\n"
            "\n"
            "run();\n"
        )

        result = transform_example_content(content, "@siebly/kraken-api", "kraken")

        assert result == "import { SpotClient } from '@siebly/kraken-api';\n\nrun();\n"

    def test_block_comment_only_for_configured_exchanges(self) -> None:
        content = (
            "import { MainClient } from '../src';\n"
            "\n"
            "/**\n"
            " * import { MainClient } from 'binance';\n"
            " */\n"
            "\n"
            "run();\n"
        )

        result = transform_example_content(content, "binance", "binance")

        # Binance SDK examples don't use doc blocks for imports
        assert " * import { MainClient } from 'binance';" in result


class TestNewlineCollapse:
    """Tests for blank line cleanup."""

    @pytest.mark.parametrize("exchange", ["binance", "okx", "acme"])
    def test_collapses_runs_of_newlines(self, exchange: str) -> None:
        content = "const a = 1;\n\n\n\n\nconst b = 2;\n\n\n"

        result = transform_example_content(content, "pkg", exchange)

        assert result == "const a = 1;\n\nconst b = 2;\n\n"
        assert not re.search(r"\n{3,}", result)

    def test_single_blank_lines_kept(self) -> None:
        content = "const a = 1;\n\nconst b = 2;\n"

        assert transform_example_content(content, "pkg", "gate") == content


class TestContentTransformer:
    """Tests for pattern match bookkeeping."""

    def test_counts_matches(self) -> None:
        transformer = ContentTransformer("binance", "binance")
        content, _ = EXCHANGE_FIXTURES["binance"]

        transformer.transform(content)

        assert transformer.files_transformed == 1
        assert transformer.match_counts["src_import"] == 1
        assert transformer.match_counts["or_comment_block"] == 1

    def test_unmatched_patterns(self) -> None:
        transformer = ContentTransformer("binance", "binance")
        content, _ = EXCHANGE_FIXTURES["binance"]

        transformer.transform(content)
        unmatched = transformer.unmatched_patterns()

        assert "src_import" not in unmatched
        assert "or_comment_block" not in unmatched
        assert "inline_comment" in unmatched
        assert "package_comment" in unmatched

    def test_unmatched_empty_before_any_file(self) -> None:
        assert ContentTransformer("okx", "okx-api").unmatched_patterns() == []

    def test_exchange_key_is_case_insensitive(self) -> None:
        content, expected = EXCHANGE_FIXTURES["okx"]

        assert transform_example_content(content, "okx-api", "OKX") == expected
