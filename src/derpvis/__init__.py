"""Keep a fleet of local git checkouts in sync with their remotes."""
