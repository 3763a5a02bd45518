"""Shared fixtures: a small PHP project on disk."""

from textwrap import dedent

import pytest


SAMPLE_FILES = {
	"src/Models/User.php": """
		<?php
		namespace App\\Models;

		class User
		{
			public function __construct(private string $name) {}

			public function name(): string
			{
				return $this->name;
			}
		}
		""",
	"src/Services/UserService.php": """
		<?php
		namespace App\\Services;

		use App\\Models\\User;
		use App\\Support\\Clock as Timer;

		class UserService
		{
			private Timer $timer;

			public function find(int $id): ?User
			{
				if ($id < 0) {
					throw new \\InvalidArgumentException('negative');
				}
				switch ($id) {
					case 1:
					case 2:
						return null;
				}
				return new User('x');
			}
		}
		""",
	"src/helpers.php": """
		<?php
		function helper() { return 1; }
		""",
	"src/Broken.php": """
		<?php
		namespace App;
		class Broken { public function a() { ) }
		""",
	"vendor/Lib/Ignored.php": """
		<?php
		class Ignored {}
		""",
	"README.md": "# not php\n",
}


@pytest.fixture
def php_project(tmp_path):
	for rel_path, content in SAMPLE_FILES.items():
		path = tmp_path / rel_path
		path.parent.mkdir(parents=True, exist_ok=True)
		path.write_text(dedent(content).lstrip())
	return tmp_path
