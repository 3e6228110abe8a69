#
# Optic - Render Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
import collections
import ctypes
import logging
import re
from decimal import Decimal
from fractions import Fraction

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest
from frozendict import frozendict

# Local ----------------------------------------------------------------------------------------------------------------
from optic.options import RenderOptions
from optic.render import render
from optic.values import NIL, Function, ListLike, MapLike, Opaque, Pattern, Scalar, ScalarRef


# Local Classes & Methods ----------------------------------------------------------------------------------------------

class Widget:
    def run(self):
        return "running"


def sample_function(x):
    y = x + 1
    return y


def _sample_function_view() -> str:
    code = sample_function.__code__
    return (f"function: sub sample_function {{ ... }} "
            f"(L{code.co_firstlineno}-{code.co_firstlineno + 2} "
            f"in {sample_function.__module__} ({code.co_filename}))")


# Tests ----------------------------------------------------------------------------------------------------------------

class TestRenderScalar:
    @pytest.mark.parametrize(
        "value, expected",
        [
            pytest.param(NIL, "(undef)", id="nil"),
            pytest.param(None, "(undef)", id="none"),
            pytest.param(Scalar(""), '"" (len 0)', id="empty"),
            pytest.param("", '"" (len 0)', id="empty-str"),
            pytest.param(Scalar("blorg"), "blorg (len 5)", id="blorg"),
            pytest.param(12345, "12345 (len 5)", id="int"),
            pytest.param(True, "True (len 4)", id="bool"),
            pytest.param(b"abc", "abc (len 3)", id="bytes"),
            pytest.param(b"\xff\xfe", "\\xff\\xfe (len 2)", id="bytes-undecodable"),
            pytest.param("héllo", "héllo (len 5)", id="unicode-chars"),
        ],
    )
    def test_plain(self, value, expected):
        assert render(value) == expected

    def test_at_limit_not_truncated(self):
        opt = RenderOptions(scalar_truncation_size=3)
        assert render("abc", opt) == "abc (len 3)"

    def test_truncated(self):
        opt = RenderOptions(scalar_truncation_size=3)
        assert render("abcde", opt) == "abc... (truncated to len 3; len 5)"

    def test_truncated_default_limit(self):
        text = "0123456789" * 100
        out = render(text)
        assert out == f"{text[:256]}... (truncated to len 256; len 1000)"

    def test_truncated_bytes(self):
        opt = RenderOptions(scalar_truncation_size=2)
        assert render(b"abcd", opt) == "ab... (truncated to len 2; len 4)"

    @pytest.mark.parametrize(
        "value, expected",
        [
            pytest.param(re.compile(r"^a+$"), "Pattern ^a+$ (len 4)", id="re-pattern"),
            pytest.param(Pattern("x|y"), "Pattern x|y (len 3)", id="pattern"),
            pytest.param(ScalarRef("42"), "ref 42 (len 2)", id="scalar-ref"),
            pytest.param(ScalarRef(""), 'ref "" (len 0)', id="scalar-ref-empty"),
            pytest.param(ctypes.c_double(1.5), "c_double 1.5 (len 3)", id="ctypes"),
        ],
    )
    def test_tagged(self, value, expected):
        assert render(value) == expected

    def test_tagged_truncated(self):
        opt = RenderOptions(scalar_truncation_size=2)
        assert render(Pattern("abcdef"), opt) == "Pattern ab... (truncated to len 2; len 6)"

    @pytest.mark.parametrize(
        "number, expected",
        [
            pytest.param(10 ** 10_000, "int: (no sample)", id="int"),
            pytest.param(Fraction(10 ** 20_000, 3), "Fraction: (no sample)", id="fraction"),
            pytest.param(Decimal("9" * 100_000), "Decimal: (no sample)", id="decimal"),
        ],
    )
    def test_number_too_large_for_str(self, number, expected):
        assert render(number) == expected

    def test_large_exponent_decimal_is_sampled(self):
        assert render(Decimal("1e100000")) == "1E+100000 (len 9)"

    def test_ctypes_pointer_not_followed(self):
        assert render(ctypes.c_char_p(16)) == "c_char_p: (no sample)"


class TestRenderList:
    def test_sampled_with_ellipsis(self):
        assert render(ListLike([Scalar("a")] * 7)) == "list: [a, a, a, a ...] (len 7)"

    def test_live_list(self):
        assert render(["a"] * 7) == "list: [a, a, a, a ...] (len 7)"

    def test_all_shown_when_within_count(self):
        assert render(["a", "b", "c", "d"]) == "list: [a, b, c, d] (len 4)"

    def test_empty(self):
        assert render([]) == "list: [] (len 0)"

    def test_children_shown_by_tag(self):
        subject = ["a", "b", {"foo": "bar"}, ["blorg"]]
        assert render(subject) == "list: [a, b, dict, list] (len 4)"

    def test_nil_child(self):
        assert render([None, 1]) == "list: [(undef), 1] (len 2)"

    def test_reference_children(self):
        subject = [re.compile("x"), Widget(), len, sample_function]
        assert render(subject) == "list: [Pattern, Widget, builtin_function_or_method, function] (len 4)"

    def test_child_trimmed(self, tiny_options):
        assert render(["abcdef", "abc"], tiny_options) == "list: [abc..., abc] (len 2)"

    def test_first_elements_in_order(self, tiny_options):
        assert render(list("vwxyz"), tiny_options) == "list: [v, w ...] (len 5)"

    @pytest.mark.parametrize(
        "obj, expected",
        [
            pytest.param((1, 2), "tuple: [1, 2] (len 2)", id="tuple"),
            pytest.param(range(10_000_000), "range: [0, 1, 2, 3 ...] (len 10000000)", id="range"),
            pytest.param(collections.deque("ab"), "deque: [a, b] (len 2)", id="deque"),
            pytest.param({"k": 1}.keys(), "dict_keys: [k] (len 1)", id="keys-view"),
            pytest.param({7}, "set: [7] (len 1)", id="set"),
        ],
    )
    def test_list_likes(self, obj, expected):
        assert render(obj) == expected

    def test_set_sample_membership(self, tiny_options):
        out = render({"p", "q", "r"}, tiny_options)
        match = re.fullmatch(r"set: \[(\w), (\w) \.\.\.\] \(len 3\)", out)
        assert match is not None
        assert set(match.groups()) < {"p", "q", "r"}

    def test_bytes_child_decoded(self):
        assert render([b"ab"]) == "list: [ab] (len 1)"


class TestRenderMap:
    def test_single_pair(self):
        assert render({"a": 1}) == "dict: {a => 1} (1 keys)"

    def test_empty(self):
        assert render({}) == "dict: {} (0 keys)"

    def test_sample_count_one(self):
        opt = RenderOptions(sample_count=1)
        out = render(MapLike({"a": Scalar("1"), "b": Scalar("2"), "c": Scalar("3")}), opt)
        match = re.fullmatch(r"dict: \{(\w) => (\w) \.\.\.\} \(3 keys\)", out)
        assert match is not None
        key, val = match.groups()
        assert (key, val) in {("a", "1"), ("b", "2"), ("c", "3")}

    def test_shown_keys_bounded(self, tiny_options):
        subject = {f"k{i}": i for i in range(100)}
        out = render(subject, tiny_options)
        assert out.count(" => ") == 2
        assert out.endswith(" ...} (100 keys)")

    def test_all_keys_no_ellipsis(self):
        out = render({"a": 1, "b": 2})
        assert out.count(" => ") == 2
        assert "..." not in out
        assert out.endswith("(2 keys)")

    def test_key_and_value_trimmed(self, tiny_options):
        assert render({"abcd": "wxyz"}, tiny_options) == "dict: {abc... => wxy...} (1 keys)"

    def test_value_chunks(self):
        subject = {"bar": ["baz"], "nil": None, "re": re.compile("x")}
        out = render(subject)
        assert out.startswith("dict: {")
        for pair in ("bar => list", "nil => (undef)", "re => Pattern"):
            assert pair in out

    def test_non_string_keys(self):
        assert render({None: 1}) == "dict: {(undef) => 1} (1 keys)"
        assert render({(1, 2): "t"}) == "dict: {tuple => t} (1 keys)"

    @pytest.mark.parametrize(
        "obj, expected",
        [
            pytest.param(frozendict(a=1), "frozendict: {a => 1} (1 keys)", id="frozendict"),
            pytest.param(collections.OrderedDict(x="y"), "OrderedDict: {x => y} (1 keys)", id="ordered-dict"),
        ],
    )
    def test_map_likes(self, obj, expected):
        assert render(obj) == expected

    def test_defaultdict_untouched(self):
        subject = collections.defaultdict(list, a=[1])
        render(subject)
        assert list(subject) == ["a"]


class TestRenderCallable:
    def test_function(self):
        assert render(sample_function) == _sample_function_view()

    def test_function_in_value_form(self):
        val = Function("handler", 10, 14, "app.views", "/srv/app/views.py")
        assert render(val) == "function: sub handler { ... } (L10-14 in app.views (/srv/app/views.py))"

    def test_method(self):
        out = render(Widget().run)
        assert out.startswith("method: sub Widget.run { ... } (L")

    def test_builtin_falls_back_to_opaque(self):
        assert render(len) == "builtin_function_or_method: (no sample)"


class TestRenderOpaque:
    @pytest.mark.parametrize(
        "obj, expected",
        [
            pytest.param(Opaque("socket"), "socket: (no sample)", id="opaque"),
            pytest.param(Widget(), "Widget: (no sample)", id="instance"),
            pytest.param(Widget, "type: (no sample)", id="class"),
            pytest.param(object(), "object: (no sample)", id="object"),
        ],
    )
    def test_no_sample(self, obj, expected):
        assert render(obj) == expected

    def test_exploding_sequence(self, exploding_sequence, caplog):
        caplog.set_level(logging.DEBUG, logger="optic.render")
        assert render(exploding_sequence) == "ExplodingSequence: (no sample)"
        assert "sampling ExplodingSequence failed" in caplog.text

    def test_exploding_mapping(self, exploding_mapping):
        assert render(exploding_mapping) == "ExplodingMapping: (no sample)"

    def test_exploding_child_only_degrades_container(self, exploding_sequence):
        # a container child is shown by tag, never sampled
        assert render([exploding_sequence]) == "list: [ExplodingSequence] (len 1)"


class TestRenderContract:
    def test_bad_options_type(self):
        with pytest.raises(TypeError, match=r"options must be a RenderOptions"):
            render("x", {"sample_count": 1})

    def test_list_output_bounded(self):
        opt = RenderOptions()
        out = render(["x" * 1000] * 1_000_000, opt)
        assert len(out) <= opt.sample_count * (opt.scalar_sample_size + len("...") + 2) + 64

    def test_map_output_bounded(self):
        opt = RenderOptions()
        subject = {("k" * 500) + str(i): "v" * 500 for i in range(1000)}
        out = render(subject, opt)
        assert len(out) <= opt.sample_count * (2 * (opt.scalar_sample_size + len("...")) + 6) + 64

    def test_scalar_output_bounded(self):
        opt = RenderOptions(scalar_truncation_size=16)
        out = render("z" * 5_000_000, opt)
        assert out == "z" * 16 + "... (truncated to len 16; len 5000000)"

    def test_nested_containers_not_expanded(self):
        deep = [[[[["bottom"]]]]]
        assert render(deep) == "list: [list] (len 1)"

    def test_rerender_output_is_plain_scalar(self):
        first = render("blorg")
        assert render(first) == f"{first} (len {len(first)})"

    def test_rerender_output_truncates(self):
        opt = RenderOptions(scalar_truncation_size=5)
        first = render("abcdefgh", opt)
        assert render(first, opt) == f"{first[:5]}... (truncated to len 5; len {len(first)})"

    def test_pure(self):
        subject = {"a": [1, 2, 3]}
        assert render(subject) == render(subject)
