import secrets
import string

RUN_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_run_id(length: int = 10) -> str:
    """
    Random alphanumeric token that scopes every resource of one test run.
    Lowercase only, since it ends up in domain and stack names.
    """
    if length < 1:
        raise ValueError("length must be positive")
    return "".join(secrets.choice(RUN_ID_ALPHABET) for _ in range(length))
