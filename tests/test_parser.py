from textwrap import dedent

import pytest

from classscan.errors import (
	UnexpectedEndOfTokensError,
	UnmatchedBracketError,
	UnmatchedClosingBracketError,
	UnmatchedOpeningBracketError,
	UnterminatedMatchError,
	UnterminatedSwitchError,
)
from classscan.lexer import tokenize
from classscan.model import Visibility
from classscan.parser import Parser


def parse(code, **kwargs):
	return Parser(**kwargs).parse_unit(tokenize(dedent(code)))


def test_class_profile_end_to_end():
	c = parse(
		"""
		<?php
		namespace App;
		use App\\Bar;
		class Foo extends Bar {
			public function baz(int $x): Bar {
				if ($x) { }
				return $x;
			}
		}
		"""
	)
	assert c.name == "App\\Foo"
	assert c.extends == "App\\Bar"
	assert len(c.functions) == 1
	fn = c.functions[0]
	assert fn.name == "baz"
	assert fn.params == 1
	assert fn.return_type == "App\\Bar"
	assert fn.visibility is Visibility.PUBLIC
	assert fn.complexity() == 2
	assert c.dependencies == ["App\\Bar"]


def test_file_without_class_yields_none():
	assert parse("<?php function foo() { return 1; }") is None
	assert parse("<?php interface Foo { public function a(); }") is None


def test_alias_resolves_to_canonical_name():
	c = parse(
		"""
		namespace App\\Http;
		use App\\Foo as Bar;
		class Controller {
			private Bar $bar;
			public function make(): Bar {}
		}
		"""
	)
	assert c.dependencies == ["App\\Foo"]
	assert c.functions[0].return_type == "App\\Foo"


def test_built_in_types_are_never_dependencies():
	c = parse(
		"""
		namespace App;
		class C {
			public int $a;
			protected ?string $b;
			private readonly array $c;
			public function f(int $x, string $y, array $z, bool $b, float $f, mixed $m, iterable $i): void {}
			public function g(): self {}
			public static function h(): static {}
			public function k(): mixed {}
			public function t(): bool {}
		}
		"""
	)
	assert c.dependencies == []
	assert [f.name for f in c.functions] == ["f", "g", "h", "k", "t"]
	assert c.functions[0].params == 7


def test_dependencies_are_deduplicated():
	c = parse(
		"""
		namespace App;
		use Lib\\Thing;
		class C {
			public function a(Thing $t): Thing {}
			public function b(Thing $t) {}
		}
		"""
	)
	assert c.dependencies == ["Lib\\Thing"]


def test_unqualified_types_resolve_to_current_namespace():
	c = parse("namespace App; class C extends Base { public function a(Repo $r) {} }")
	assert c.extends == "App\\Base"
	assert c.dependencies == ["App\\Repo"]


def test_fully_qualified_types_are_kept():
	c = parse("namespace App; class C extends \\Other\\Base { public function a(\\Lib\\Repo $r) {} }")
	assert c.extends == "\\Other\\Base"
	assert c.dependencies == ["\\Lib\\Repo"]


def test_relative_name_through_imported_prefix():
	c = parse("namespace App; use Lib\\Models; class C { public function a(Models\\User $u) {} }")
	assert c.dependencies == ["Lib\\Models\\User"]


def test_implements_kept_verbatim_by_default():
	code = "namespace App; use Lib\\Countable; class C implements Countable, \\JsonSerializable {}"
	c = parse(code)
	assert c.implements == ["Countable", "\\JsonSerializable"]
	assert c.dependencies == ["Lib\\Countable"]

	resolved = parse(code, resolve_implements=True)
	assert resolved.implements == ["Lib\\Countable", "\\JsonSerializable"]


def test_abstract_class_and_methods():
	c = parse(
		"""
		namespace App;
		abstract class Shape {
			abstract public function area(): float;
			public function name(): string { return 'shape'; }
		}
		"""
	)
	assert c.is_abstract
	area, name = c.functions
	assert area.name == "area"
	assert area.is_abstract
	assert area.stmts == []
	assert not name.is_abstract


def test_trait_with_used_traits():
	c = parse("namespace App; trait Greets { use Polite, Loud; public function hi() {} }")
	assert c.name == "App\\Greets"
	assert c.dependencies == ["App\\Polite", "App\\Loud"]


def test_functions_sorted_by_descending_complexity_stably():
	c = parse(
		"""
		class C {
			public function a() {}
			public function b($x) { if ($x) {} }
			public function c($x) { if ($x) {} foreach ($x as $y) {} }
			public function d() {}
		}
		"""
	)
	assert [f.name for f in c.functions] == ["c", "b", "a", "d"]


def test_visibility_is_recorded():
	c = parse(
		"""
		class C {
			private function a() {}
			protected function b() {}
			function c() {}
			private static function d() {}
		}
		"""
	)
	visibility = {f.name: f.visibility for f in c.functions}
	assert visibility == {
		"a": Visibility.PRIVATE,
		"b": Visibility.PROTECTED,
		"c": Visibility.PUBLIC,
		# static methods are always reported as public
		"d": Visibility.PUBLIC,
	}


def test_constants_and_unknown_members_are_skipped():
	c = parse(
		"""
		namespace App;
		class C {
			const FOO = Bar::BAZ;
			public const int LIMIT = 3;
			public function a() {}
		}
		"""
	)
	assert [f.name for f in c.functions] == ["a"]
	assert c.dependencies == []


def test_typed_properties():
	c = parse(
		"""
		namespace App;
		class C {
			public readonly Clock $clock;
			private ?Logger $logger = null;
			public static Registry $registry;
		}
		"""
	)
	assert c.dependencies == ["App\\Clock", "App\\Logger", "App\\Registry"]


def test_promoted_constructor_parameters():
	c = parse(
		"""
		namespace App;
		use Lib\\Clock;
		class C {
			public function __construct(private readonly Clock $clock, int $n = 5, ?Foo $foo = null) {}
		}
		"""
	)
	ctor = c.functions[0]
	assert ctor.params == 3
	assert c.dependencies == ["Lib\\Clock", "App\\Foo"]


def test_union_return_type():
	c = parse("namespace App; class C { public function f(): Foo|Bar { if ($x) {} } }")
	fn = c.functions[0]
	assert fn.return_type == "App\\Foo"
	assert fn.complexity() == 2
	assert sorted(c.dependencies) == ["App\\Bar", "App\\Foo"]


def test_member_access_is_not_read_as_keyword():
	c = parse(
		"""
		namespace App;
		$name = Foo::class;
		class C {
			public function a($x) {
				$this->match($x);
				if ($x) {}
			}
		}
		"""
	)
	assert c.name == "App\\C"
	assert c.functions[0].complexity() == 2


def test_anonymous_class_is_ignored():
	assert parse("$x = new class { };") is None


def test_anonymous_class_with_parent_is_ignored():
	code = """
		<?php
		use Illuminate\\Database\\Migrations\\Migration;

		return new class extends Migration {
			public function up(): void { if ($x) {} }
		};
		"""
	assert parse(code) is None
	assert parse("$x = new class implements Countable { };") is None


def test_class_modifiers_after_abstract():
	c = parse("namespace App; abstract readonly class Money { public function amount(): int {} }")
	assert c.name == "App\\Money"
	assert c.is_abstract
	assert [f.name for f in c.functions] == ["amount"]

	c = parse("namespace App; final class Rate { final public function value() {} }")
	assert c.name == "App\\Rate"
	assert not c.is_abstract
	assert c.functions[0].visibility is Visibility.PUBLIC


def test_namespace_is_inherited_between_units():
	parser = Parser()
	parser.parse_unit(tokenize("namespace App; use Lib\\X; class A {}"))
	b = parser.parse_unit(tokenize("class B { public function f(X $x) {} }"))
	assert b.name == "App\\B"
	# imports do not leak between units
	assert b.dependencies == ["App\\X"]


def test_namespace_reset_when_not_inherited():
	parser = Parser(inherit_namespace=False)
	parser.parse_unit(tokenize("namespace App; class A {}"))
	b = parser.parse_unit(tokenize("class B {}"))
	assert b.name == "\\B"


def test_mismatched_closing_bracket():
	with pytest.raises(UnmatchedClosingBracketError) as exc:
		parse("class C { public function a() { ) }")
	assert exc.value.expected == "}"
	assert exc.value.found == ")"


def test_closing_bracket_without_opener():
	with pytest.raises(UnmatchedBracketError):
		parse("} class C {}")


def test_unclosed_bracket():
	with pytest.raises(UnmatchedOpeningBracketError):
		parse("function f() {")
	with pytest.raises(UnmatchedOpeningBracketError):
		parse("class C { public function a() {")


def test_unexpected_end_of_tokens():
	with pytest.raises(UnexpectedEndOfTokensError):
		parse("namespace")


def test_unterminated_switch():
	with pytest.raises(UnterminatedSwitchError):
		parse("class C { function a($x) { switch ($x) { case 1:")


def test_unterminated_match():
	with pytest.raises(UnterminatedMatchError):
		parse("class C { function a($x) { return match ($x) { 1 => 2,")
