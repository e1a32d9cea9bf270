"""
Tests for editor autocomplete suggestions.
"""

import pytest

from flowlint.completion import MAX_WORD_SUGGESTIONS, SuggestionKind, suggest_completions
from flowlint.models import Library


@pytest.fixture
def libraries():
    return [
        Library.model_validate(
            {
                "name": "System.Runtime",
                "namespaces": [
                    {
                        "name": "System",
                        "classes": [
                            {
                                "name": "Console",
                                "methods": [{"name": "WriteLine"}, {"name": "ReadLine"}],
                            },
                            {"name": "Math", "methods": [{"name": "Round", "returnType": "double"}]},
                        ],
                    },
                    {"name": "Serilog", "classes": []},
                ],
            }
        )
    ]


class TestSuggestCompletions:
    """Test each completion trigger."""

    def test_open_brace_lists_variables(self, variables):
        suggestion = suggest_completions("Hello {", variables)

        assert suggestion.kind is SuggestionKind.VARIABLE
        assert suggestion.items[:2] == ("total", "count")
        assert len(suggestion.items) == len(variables)

    def test_open_brace_without_variables(self):
        assert suggest_completions("{", []) is None

    def test_system_keywords(self):
        """Test that '@' offers system keywords filtered by prefix."""
        every = suggest_completions("Stamp: @")
        assert every.kind is SuggestionKind.SYSTEM
        assert len(every.items) == 5

        narrowed = suggest_completions("@us")
        assert narrowed.items == ("@USER_ID",)
        assert narrowed.replace_length == 3

    def test_struct_fields(self, variables, structs):
        """Test member completion for a struct-typed variable."""
        suggestion = suggest_completions("{customer.", variables, structs)

        assert suggestion.kind is SuggestionKind.FIELD
        assert suggestion.items == ("name", "address", "orders")

    def test_library_members(self, libraries):
        """Test namespace and class member completion."""
        classes = suggest_completions("System.", libraries=libraries)
        assert classes.items == ("Console", "Math")

        methods = suggest_completions("Console.", libraries=libraries)
        assert methods.kind is SuggestionKind.LIBRARY
        assert methods.items == ("WriteLine", "ReadLine")

    def test_unknown_member_owner(self, variables, structs, libraries):
        assert suggest_completions("title.", variables, structs, libraries) is None
        assert suggest_completions("Serilog.", libraries=libraries) is None

    def test_keyword_prefix(self):
        """Test case-insensitive keyword completion excluding the exact word."""
        suggestion = suggest_completions("FO")
        assert suggestion.kind is SuggestionKind.KEYWORD
        assert suggestion.items == ("for", "foreach")
        assert suggestion.replace_length == 2

        assert suggest_completions("x = for").items == ("foreach",)

    def test_namespace_prefix(self, libraries):
        suggestion = suggest_completions("Sys", libraries=libraries)

        assert suggestion.kind is SuggestionKind.LIBRARY
        assert suggestion.items[0] == "System"

    def test_suggestions_capped(self):
        assert len(suggest_completions("s").items) == MAX_WORD_SUGGESTIONS

    @pytest.mark.parametrize("text", ["", "zzq", "total + "])
    def test_nothing_to_suggest(self, text):
        assert suggest_completions(text) is None
