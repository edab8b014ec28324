from __future__ import annotations

from pathlib import Path
import unittest

from scaffolder.config import ScaffoldConfig
from scaffolder.dependencies import DependencyRecord, Ecosystem
from scaffolder.ecosystems import default_handlers
from scaffolder.planner import CommandPlanner
from scaffolder.stacks import DatabaseClient, ToolDescriptor


ROOT = Path("/tmp/demo")


def _config(**overrides) -> ScaffoldConfig:
    values = dict(project_name="demo", root_dir=ROOT, stack="ssrjs")
    values.update(overrides)
    return ScaffoldConfig(**values)


class CommandPlannerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.planner = CommandPlanner(default_handlers(), cwd=ROOT)

    def _argvs(self, config: ScaffoldConfig):
        return [invocation.argv for invocation in self.planner.plan_install_queue(config)]

    def test_npm_scenario(self) -> None:
        config = _config(
            dependencies={
                Ecosystem.NPM: (
                    DependencyRecord(name="lodash"),
                    DependencyRecord(name="jest", version="^29.0.0", dev=True, then=(("echo", "done"),)),
                )
            }
        )
        self.assertEqual(
            self._argvs(config),
            [
                ("npm", "init", "-y"),
                ("npm", "add", "lodash"),
                ("npm", "add", "jest@^29.0.0", "--dev"),
                ("echo", "done"),
            ],
        )

    def test_cargo_scenario(self) -> None:
        config = _config(dependencies={Ecosystem.CARGO: (DependencyRecord(name="serde", features=("derive",)),)})
        self.assertEqual(
            self._argvs(config),
            [("cargo", "init"), ("cargo", "add", "serde", "--features", "derive")],
        )

    def test_unused_ecosystem_is_not_initialized(self) -> None:
        self.assertEqual(self._argvs(_config()), [])

    def test_empty_dependency_list_still_initializes(self) -> None:
        self.assertEqual(self._argvs(_config(dependencies={Ecosystem.COMPOSER: ()})), [("composer", "init")])

    def test_init_phase_precedes_all_installs(self) -> None:
        config = _config(
            dependencies={
                Ecosystem.COMPOSER: (DependencyRecord(name="slim/slim"),),
                Ecosystem.NPM: (DependencyRecord(name="vite", dev=True),),
                Ecosystem.CARGO: (DependencyRecord(name="serde"),),
            }
        )
        self.assertEqual(
            self._argvs(config),
            [
                ("cargo", "init"),
                ("npm", "init", "-y"),
                ("composer", "init"),
                ("npm", "add", "vite", "--dev"),
                ("cargo", "add", "serde"),
                ("composer", "require", "slim/slim"),
            ],
        )

    def test_declaration_order_is_preserved(self) -> None:
        names = ["zeta", "alpha", "mid", "beta"]
        config = _config(dependencies={Ecosystem.NPM: tuple(DependencyRecord(name=name) for name in names)})
        installed = [argv[2] for argv in self._argvs(config)[1:]]
        self.assertEqual(installed, names)

    def test_tools_and_database_follow_dependencies(self) -> None:
        config = _config(
            dependencies={Ecosystem.NPM: (DependencyRecord(name="express"),)},
            linters=(ToolDescriptor("eslint", Ecosystem.NPM, (DependencyRecord(name="eslint", dev=True),)),),
            formatters=(ToolDescriptor("prettier", Ecosystem.NPM, (DependencyRecord(name="prettier", dev=True),)),),
            test_frameworks=(ToolDescriptor("jest", Ecosystem.NPM, (DependencyRecord(name="jest", dev=True),)),),
            database=DatabaseClient(
                "postgres",
                {
                    Ecosystem.NPM: (DependencyRecord(name="pg"),),
                    Ecosystem.CARGO: (DependencyRecord(name="sqlx"),),
                },
            ),
        )
        self.assertEqual(
            self._argvs(config),
            [
                ("npm", "init", "-y"),
                ("npm", "add", "express"),
                ("npm", "add", "eslint", "--dev"),
                ("npm", "add", "prettier", "--dev"),
                ("npm", "add", "jest", "--dev"),
                ("npm", "add", "pg"),
            ],
        )

    def test_init_emitted_once_per_planner(self) -> None:
        records = (DependencyRecord(name="lodash"),)
        first = self.planner.plan_dependencies(Ecosystem.NPM, records)
        second = self.planner.plan_dependencies(Ecosystem.NPM, records)
        self.assertEqual(first[0].argv, ("npm", "init", "-y"))
        self.assertEqual([invocation.argv for invocation in second], [("npm", "add", "lodash")])

    def test_absent_list_plans_nothing(self) -> None:
        self.assertEqual(self.planner.plan_dependencies(Ecosystem.CARGO, None), [])

    def test_invocations_target_project_root(self) -> None:
        config = _config(dependencies={Ecosystem.NPM: (DependencyRecord(name="lodash"),)})
        for invocation in self.planner.plan_install_queue(config):
            self.assertEqual(invocation.cwd, ROOT)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
