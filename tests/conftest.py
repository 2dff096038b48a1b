from pytest import Item, fixture

from pocketcalc.engine import INITIAL, apply


def pytest_assertion_pass(item: Item,
                          lineno: int,
                          orig: str,
                          expl: str) -> None:
    '''
    Log every assertion, in case we later need to audit a run.

    Excessive in most cases.

    Use with pytest -rP.
    '''
    print('given', item.name + ':' + str(lineno), str(orig))  # no repr()!)
    print('actual', item.name + ':' + str(lineno),
          # Get rid of full-diff, -vv for full diff, etc.
          '\n'.join(str(expl).splitlines()[:-2]))


@fixture
def press():
    '''
    Press keys in turn, from the initial state unless given another.
    '''
    def press(*keys, state=INITIAL):
        for key in keys:
            state = apply(state, key)
        return state
    return press
