from evmachine.collector.write_barrier import Mutation


def test_get_returns_the_same_object():
    data = {"k": 1}
    assert Mutation(data).get() is data


def test_changes_through_mutation_are_visible():
    data = []
    Mutation(data).get().append(7)
    assert data == [7]


def test_repr_wraps_the_data():
    assert repr(Mutation([1])) == "Mutation([1])"