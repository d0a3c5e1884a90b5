"""Account sign-up and sign-in."""
