"""Email address validation."""


def is_valid_email(email) -> bool:
    """Check that an email address follows a basic valid structure.

    Enforces structural validity: exactly one @, valid local and domain parts,
    no consecutive dots, no forbidden characters.
    """
    if not isinstance(email, str):
        return False

    email = email.strip()
    if not email or len(email) > 254:
        return False

    if " " in email or "\t" in email or "\n" in email:
        return False

    if email.count("@") != 1:
        return False

    local_part, domain_part = email.split("@", 1)

    if not local_part or local_part.startswith(".") or local_part.endswith("."):
        return False

    if not domain_part or domain_part.startswith(".") or domain_part.endswith("."):
        return False

    # Each domain label: no leading/trailing hyphen
    for label in domain_part.split("."):
        if not label or label.startswith("-") or label.endswith("-"):
            return False

    if "." not in domain_part or len(domain_part.rsplit(".", 1)[1]) < 2:
        return False

    if ".." in local_part:
        return False

    return not any(forbidden in email for forbidden in (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\"))
