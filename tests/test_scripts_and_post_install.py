from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from core.filesystem import FilesystemError
from scaffolder.config import ScaffoldConfig
from scaffolder.dependencies import Ecosystem
from scaffolder.ecosystems import default_handlers
from scaffolder.post_install import (
    PLAINWEB,
    RSAPI,
    RSWEB,
    SSRJS,
    PostInstallSelector,
    SPA_SCAFFOLD_ARGV,
    patch_manifests,
)
from scaffolder.scripts import ScriptInjector


ROOT = Path("/tmp/demo")


def _config(**overrides) -> ScaffoldConfig:
    values = dict(project_name="demo", root_dir=ROOT, stack=SSRJS)
    values.update(overrides)
    return ScaffoldConfig(**values)


class ScriptInjectorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.injector = ScriptInjector(default_handlers(), cwd=ROOT)

    def test_npm_and_composer_scripts(self) -> None:
        config = _config(
            scripts={
                Ecosystem.COMPOSER: {"test": "phpunit"},
                Ecosystem.NPM: {"start": "node src/index.js", "lint": "eslint . && echo 'ok'"},
            }
        )
        argvs = [invocation.argv for invocation in self.injector.plan(config)]
        self.assertEqual(
            argvs,
            [
                ("npm", "pkg", "set", "scripts.start=node src/index.js"),
                ("npm", "pkg", "set", "scripts.lint=eslint . && echo 'ok'"),
                ("composer", "config", "--", "scripts.test", "phpunit"),
            ],
        )

    def test_no_scripts(self) -> None:
        self.assertEqual(self.injector.plan(_config()), [])
        self.assertEqual(self.injector.plan(_config(scripts={Ecosystem.NPM: {}})), [])

    def test_node_tool_is_respected(self) -> None:
        injector = ScriptInjector(default_handlers("bun"), cwd=ROOT)
        invocation = injector.plan(_config(scripts={Ecosystem.NPM: {"dev": "bun run src/index.ts"}}))[0]
        self.assertEqual(invocation.argv[0], "bun")


class PostInstallSelectorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.selector = PostInstallSelector(default_handlers(), cwd=ROOT)

    def _argvs(self, config: ScaffoldConfig):
        return [invocation.argv for invocation in self.selector.select(config)]

    def test_spa_takes_precedence_over_template_engine(self) -> None:
        self.assertEqual(self._argvs(_config(spa=True, template_engine=True)), [SPA_SCAFFOLD_ARGV])

    def test_template_engine_per_stack(self) -> None:
        self.assertEqual(self._argvs(_config(template_engine=True)), [("npm", "add", "ejs")])
        self.assertEqual(self._argvs(_config(stack=RSAPI, template_engine=True)), [("cargo", "add", "askama")])

    def test_no_frontend_selected(self) -> None:
        self.assertEqual(self._argvs(_config()), [])

    def test_other_stacks_ignore_frontend_flags(self) -> None:
        self.assertEqual(self._argvs(_config(stack=RSWEB, spa=True, template_engine=True)), [])

    def test_e2e_only_for_plain_web(self) -> None:
        self.assertEqual(self._argvs(_config(stack=PLAINWEB, e2e=True)), [("npm", "add", "@playwright/test", "--dev")])
        self.assertEqual(self._argvs(_config(stack=SSRJS, e2e=True)), [])
        self.assertEqual(self._argvs(_config(stack=PLAINWEB)), [])


class ManifestPatchTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_rsweb_appends_features(self) -> None:
        manifest = self.root / "Cargo.toml"
        manifest.write_text('[package]\nname = "demo"\n')
        touched = patch_manifests(_config(stack=RSWEB, root_dir=self.root), self.root)
        self.assertEqual(touched, [manifest])
        content = manifest.read_text()
        self.assertTrue(content.startswith('[package]\nname = "demo"\n'))
        self.assertIn('ssr = ["dioxus-fullstack/axum"]', content)
        self.assertIn('web = ["dioxus-fullstack/web"]', content)

    def test_rsweb_without_manifest_fails(self) -> None:
        with self.assertRaises(FilesystemError):
            patch_manifests(_config(stack=RSWEB, root_dir=self.root), self.root)

    def test_other_stacks_untouched(self) -> None:
        self.assertEqual(patch_manifests(_config(root_dir=self.root), self.root), [])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
