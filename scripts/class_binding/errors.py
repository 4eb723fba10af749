"""
Errors raised while generating class bindings
"""


class BindingError(Exception):
    """A class, member or type cannot be bound

    Raised at generation time, so no C++ is written for a binding that
    could not compile or could not register.
    """
