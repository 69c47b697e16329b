from __future__ import annotations

import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir, os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from base_classes import AmbiguousCompletion, NoAutoCompleteMatch
from utils.tab_completion_utils import TabCompletionHandler, candidates, complete

OPTIONS = ['load', 'list', 'save', 'saveas']


def test_unique_prefix():
    assert complete(OPTIONS, 'lo') == 'load'


def test_exact_match_wins_over_longer_options():
    assert complete(OPTIONS, 'save') == 'save'


def test_ambiguous_prefix_reports_candidates():
    with pytest.raises(AmbiguousCompletion) as excinfo:
        complete(OPTIONS, 'l')
    assert excinfo.value.candidates == ['load', 'list']
    assert excinfo.value.kind == 'ambiguous_completion'


@pytest.mark.parametrize("word", ['', None, 'x'])
def test_no_match(word):
    with pytest.raises(NoAutoCompleteMatch) as excinfo:
        complete(OPTIONS, word)
    assert excinfo.value.kind == 'no_completion'


def test_duplicate_options_are_not_ambiguous():
    assert complete(['same', 'same'], 's') == 'same'
    assert candidates(['b', 'a', 'b'], '') == ['b', 'a']


def test_completer_cycles_through_candidates():
    handler = TabCompletionHandler()
    handler._options = OPTIONS
    assert handler.choice_completer('sa', 0) == 'save'
    assert handler.choice_completer('sa', 1) == 'saveas'
    assert handler.choice_completer('sa', 2) is None
