from aoclang.environment import Environment


def test_define_and_lookup_walks_outward():
    root = Environment()
    root.define('x', 1)
    child = Environment(root)
    assert child.lookup('x') == (True, 1)
    assert child.lookup('y') == (False, None)


def test_define_shadows_outer_binding():
    root = Environment()
    root.define('x', 1)
    child = Environment(root)
    child.define('x', 2)
    assert child.lookup('x') == (True, 2)
    assert root.lookup('x') == (True, 1)


def test_assign_mutates_nearest_definition():
    root = Environment()
    root.define('x', 1)
    child = Environment(Environment(root))
    assert child.assign('x', 5)
    assert root.values['x'] == 5
    assert 'x' not in child.values


def test_assign_to_undeclared_name_is_a_no_op():
    root = Environment()
    child = Environment(root)
    assert not child.assign('missing', 1)
    assert child.lookup('missing') == (False, None)
