from __future__ import annotations

from pathlib import Path
import unittest

from scaffolder.dependencies import DependencyRecord, Ecosystem
from scaffolder.ecosystems import CargoHandler, ComposerHandler, NodeHandler, default_handlers


ROOT = Path("/tmp/demo")


class NodeHandlerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.handler = NodeHandler()

    def test_init(self) -> None:
        invocation = self.handler.init_invocation(ROOT)
        self.assertEqual(invocation.argv, ("npm", "init", "-y"))
        self.assertEqual(invocation.cwd, ROOT)

    def test_latest_install_has_no_version_suffix(self) -> None:
        invocation = self.handler.install_invocation(DependencyRecord(name="lodash"), ROOT)
        self.assertEqual(invocation.argv, ("npm", "add", "lodash"))

    def test_pinned_dev_install(self) -> None:
        record = DependencyRecord(name="jest", version="^29.0.0", dev=True)
        invocation = self.handler.install_invocation(record, ROOT)
        self.assertEqual(invocation.argv, ("npm", "add", "jest@^29.0.0", "--dev"))
        self.assertEqual(invocation.argv.count("--dev"), 1)

    def test_features_are_ignored(self) -> None:
        record = DependencyRecord(name="lodash", features=("x",))
        self.assertEqual(self.handler.install_invocation(record, ROOT).argv, ("npm", "add", "lodash"))

    def test_bun_tool(self) -> None:
        handler = NodeHandler("bun")
        self.assertEqual(handler.init_invocation(ROOT).argv, ("bun", "init", "-y"))
        self.assertEqual(handler.install_invocation(DependencyRecord(name="hono"), ROOT).argv, ("bun", "add", "hono"))

    def test_unknown_tool_rejected(self) -> None:
        with self.assertRaises(ValueError):
            NodeHandler("yarn")

    def test_script_invocation(self) -> None:
        invocation = self.handler.script_invocation("dev", "node --watch src/index.js", ROOT)
        self.assertEqual(invocation.argv, ("npm", "pkg", "set", "scripts.dev=node --watch src/index.js"))


class CargoHandlerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.handler = CargoHandler()

    def test_init(self) -> None:
        self.assertEqual(self.handler.init_invocation(ROOT).argv, ("cargo", "init"))

    def test_features_joined_into_single_argument(self) -> None:
        record = DependencyRecord(name="serde", features=("derive",))
        invocation = self.handler.install_invocation(record, ROOT)
        self.assertEqual(invocation.argv, ("cargo", "add", "serde", "--features", "derive"))

    def test_pinned_dev_with_multiple_features(self) -> None:
        record = DependencyRecord(name="tokio", version="1.38", dev=True, features=("macros", "rt"))
        invocation = self.handler.install_invocation(record, ROOT)
        self.assertEqual(invocation.argv, ("cargo", "add", "tokio@1.38", "--dev", "--features", "macros,rt"))

    def test_git_fetch_environment(self) -> None:
        invocation = self.handler.install_invocation(DependencyRecord(name="serde"), ROOT)
        self.assertEqual(invocation.env, {"CARGO_NET_GIT_FETCH_WITH_CLI": "true"})
        self.assertEqual(self.handler.init_invocation(ROOT).env, {})

    def test_scripts_not_supported(self) -> None:
        self.assertFalse(self.handler.supports_scripts)
        with self.assertRaises(ValueError):
            self.handler.script_invocation("run", "cargo run", ROOT)


class ComposerHandlerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.handler = ComposerHandler()

    def test_init(self) -> None:
        self.assertEqual(self.handler.init_invocation(ROOT).argv, ("composer", "init"))

    def test_require(self) -> None:
        record = DependencyRecord(name="phpunit/phpunit", version="^10.5", dev=True)
        invocation = self.handler.install_invocation(record, ROOT)
        self.assertEqual(invocation.argv, ("composer", "require", "phpunit/phpunit@^10.5", "--dev"))

    def test_script_invocation(self) -> None:
        invocation = self.handler.script_invocation("test", "phpunit --colors", ROOT)
        self.assertEqual(invocation.argv, ("composer", "config", "--", "scripts.test", "phpunit --colors"))


class DependencyInvocationTests(unittest.TestCase):
    def test_then_commands_follow_their_install(self) -> None:
        handler = default_handlers()[Ecosystem.NPM]
        records = [
            DependencyRecord(name="husky", dev=True, then=(("npx", "husky", "init"), ("echo", "done"))),
            DependencyRecord(name="lodash"),
        ]
        argvs = [invocation.argv for invocation in handler.dependency_invocations(records, ROOT)]
        self.assertEqual(
            argvs,
            [
                ("npm", "add", "husky", "--dev"),
                ("npx", "husky", "init"),
                ("echo", "done"),
                ("npm", "add", "lodash"),
            ],
        )

    def test_then_commands_carry_no_environment(self) -> None:
        handler = default_handlers()[Ecosystem.CARGO]
        record = DependencyRecord(name="dioxus", then=(("cargo", "install", "dioxus-cli"),))
        install, follow_up = handler.dependency_invocations([record], ROOT)
        self.assertTrue(install.env)
        self.assertEqual(follow_up.env, {})
        self.assertEqual(follow_up.cwd, ROOT)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
