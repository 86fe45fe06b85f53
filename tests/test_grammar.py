import pytest

from barscope.grammar import GrammarError, Rule, match_rule, matches_fully, path_tokens


def _assert_all(rule, items):
    for item in items:
        assert matches_fully(rule, item), item


def test_raw_text():
    _assert_all(
        Rule.RAW_TEXT,
        [
            "<h1> helloworld </h1>    ",
            r"hello\{{world}}",
            r"hello\{{#if world}}nice\{{/if}}",
            r"hello \{{{{raw}}}}hello\{{{{/raw}}}}",
        ],
    )
    assert not matches_fully(Rule.RAW_TEXT, r"\\{{hello}}")


def test_raw_block_text():
    assert matches_fully(Rule.RAW_BLOCK_TEXT, "<h1> {{hello}} </h1>")


def test_reference():
    _assert_all(
        Rule.REFERENCE,
        [
            "a", "abc", "../a", "a.b", "@abc", "a.[abc]", "aBc.[abc]", "abc.[0].[nice]",
            "some-name", "this.[0].ok", "this.[$id]", "[$id]", "$id", "this.[null]",
        ],
    )


def test_name():
    _assert_all(Rule.NAME, ["if", "(abc)"])


def test_param():
    _assert_all(Rule.PARAM, ["hello", "\"json literal\"", "nullable", "truestory"])


def test_hash():
    _assert_all(Rule.HASH, ["hello=world", "hello=\"world\"", "hello=(world)", "hello=(world 0)"])


def test_json_literal():
    _assert_all(
        Rule.LITERAL,
        [
            "\"json string\"", "\"quot: \\\"\"", "[]", "[\"hello\"]", "[1,2,3,4,true]",
            "{\"hello\": \"world\"}", "{}", "{\"a\":1, \"b\":2 }", "\"nullable\"",
        ],
    )


def test_comment():
    _assert_all(
        Rule.HBS_COMMENT,
        [
            "{{!-- <hello {{ a-b c-d}} {{d-c}} ok --}}",
            "{{!--\n   <li><a href=\"{{up-dir nest-count}}{{base-url}}index.html\">{{this.title}}</a></li>\n --}}",
            "{{!    -- good  --}}",
        ],
    )
    _assert_all(Rule.HBS_COMMENT_COMPACT, ["{{! hello }}", "{{! test me }}"])


def test_subexpression():
    _assert_all(Rule.SUBEXPRESSION, ["(sub)", "(sub 0)", "(sub a=1)"])


def test_expression():
    _assert_all(
        Rule.EXPRESSION,
        [
            "{{exp}}", "{{(exp)}}", "{{../exp}}", "{{exp 1}}", "{{exp \"literal\"}}",
            "{{exp \"literal with space\"}}", "{{exp 'literal with space'}}",
            r'{{exp "literal with escape \\\\"}}', "{{exp ref}}", "{{exp (sub)}}",
            "{{exp (sub 123)}}", "{{exp []}}", "{{exp {}}}", "{{exp key=1}}",
            "{{exp key=ref}}", "{{exp key='literal with space'}}",
            "{{exp key=\"literal with space\"}}", "{{exp key=(sub)}}",
            "{{exp key=(sub 0)}}", "{{exp key=(sub 0 key=1)}}",
        ],
    )


def test_identifier_with_dash():
    assert matches_fully(Rule.EXPRESSION, "{{exp-foo}}")


def test_html_expression():
    _assert_all(
        Rule.HTML_EXPRESSION,
        [
            "{{{html}}}", "{{{(html)}}}", "{{&html}}", "{{{html 1}}}", "{{{html p=true}}}",
            "{{{~ html}}}", "{{{html ~}}}", "{{{~ html ~}}}", "{{~{ html }~}}",
            "{{~{ html }}}", "{{{ html }~}}",
        ],
    )


def test_helper_start():
    _assert_all(
        Rule.HELPER_BLOCK_START,
        [
            "{{#if hello}}", "{{#if (hello)}}", "{{#if hello=world}}",
            "{{#if hello hello=world}}", "{{#if []}}", "{{#if {}}}", "{{#if}}",
            "{{~#if hello~}}", "{{#each people as |person|}}",
            "{{#each-obj obj as |val key|}}", "{{#each assets}}",
        ],
    )


def test_helper_end():
    _assert_all(Rule.HELPER_BLOCK_END, ["{{/if}}", "{{~/if}}", "{{~/if ~}}", "{{/if   ~}}"])


def test_helper_block():
    _assert_all(
        Rule.HELPER_BLOCK,
        [
            "{{#if hello}}hello{{/if}}", "{{#if true}}hello{{/if}}",
            "{{#if nice ok=1}}hello{{/if}}", "{{#if}}hello{{else}}world{{/if}}",
            "{{#if}}hello{{^}}world{{/if}}", "{{#if}}{{#if}}hello{{/if}}{{/if}}",
            "{{#if}}hello{{~else}}world{{/if}}", "{{#if}}hello{{else~}}world{{/if}}",
            "{{#if}}hello{{~^~}}world{{/if}}", "{{#if}}{{/if}}",
        ],
    )


def test_raw_block():
    _assert_all(
        Rule.RAW_BLOCK,
        ["{{{{if hello}}}}good {{hello}}{{{{/if}}}}", "{{{{if hello}}}}{{#if nice}}{{/if}}{{{{/if}}}}"],
    )


def test_block_param():
    _assert_all(Rule.BLOCK_PARAM, ["as |person|", "as |val key|"])


@pytest.mark.parametrize(
    "text",
    [
        "a", "a.b.c.d", "a.[0].[1].[2]", "a.[abc]", "a/v/c.d.s", "a.[0]/b/c/d",
        "a.[bb c]/b/c/d", "a.[0].[#hello]", "../a/b.[0].[1]", "this.[0]/[1]/this/a",
        "./this_name", "./goo/[/bar]", "a.[你好]", "a.[10].[#comment]", "a.[]",
        "./[/foo]", "[foo]", "@root/a/b", "nullable",
    ],
)
def test_path(text):
    assert match_rule(Rule.PATH, text) > 0


def test_decorator_expression():
    _assert_all(Rule.DECORATOR_EXPRESSION, ["{{* ssh}}", "{{~* ssh}}"])


def test_decorator_block():
    _assert_all(
        Rule.DECORATOR_BLOCK,
        [
            "{{#* inline}}something{{/inline}}",
            "{{~#* inline}}hello{{/inline}}",
            "{{#* inline \"partialname\"}}something{{/inline}}",
        ],
    )


def test_partial_expression():
    _assert_all(
        Rule.PARTIAL_EXPRESSION,
        [
            "{{> hello}}", "{{> (hello)}}", "{{~> hello a}}", "{{> hello a=1}}",
            "{{> (hello) a=1}}", "{{> hello.world}}", "{{> [a83?f4+.3]}}", "{{> 'anif?.bar'}}",
        ],
    )


def test_partial_block():
    assert matches_fully(Rule.PARTIAL_BLOCK, "{{#> hello}}nice{{/hello}}")


def test_no_match_raises():
    with pytest.raises(GrammarError):
        match_rule(Rule.REFERENCE, "]")
    with pytest.raises(GrammarError):
        path_tokens("")


def test_path_tokens():
    assert path_tokens("@root/a") == [
        (Rule.PATH_ROOT, "@root"),
        (Rule.PATH_ID, "a"),
    ]
    assert path_tokens("../[b c]") == [(Rule.PATH_UP, ".."), (Rule.PATH_RAW_ID, "b c")]