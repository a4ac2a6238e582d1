from modrewrite.services.ids import IdGenerator


def test_generate_counts_up_across_prefixes():
    ids = IdGenerator()

    assert ids.generate("mod") == "mod$0"
    assert ids.generate("mod") == "mod$1"
    # One counter is shared by every prefix.
    assert ids.generate("key") == "key$2"


def test_reset_starts_over():
    ids = IdGenerator()
    ids.generate("mod")
    ids.generate("mod")

    ids.reset()

    assert ids.counter == 0
    assert ids.generate("mod") == "mod$0"


def test_generators_are_independent():
    first = IdGenerator()
    second = IdGenerator()
    first.generate("mod")

    assert second.generate("mod") == "mod$0"
