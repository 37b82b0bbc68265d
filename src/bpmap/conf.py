default_conf = {
    # maximum number of children of an internal node
    "order": 5,
    # run the structural checker after every put/remove
    "check_invariants": False,
}


class Conf(dict):
    """Tree settings, readable and writable as attributes.

    Only the keys of ``default_conf`` are accepted.
    """

    def __init__(self, **overrides):
        super().__init__(default_conf)
        for key, value in overrides.items():
            if value is not None:
                self[key] = value

    def __setitem__(self, key, value):
        if key not in default_conf:
            raise TypeError(f"unknown setting {key!r}")
        super().__setitem__(key, value)

    def __getattr__(self, key):
        if key not in default_conf:
            raise AttributeError(f"{type(self).__name__} has no setting {key!r}")
        return self[key]

    def __setattr__(self, key, value):
        self[key] = value


def build_conf(**overrides) -> Conf:
    return Conf(**overrides)
