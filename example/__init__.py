"""Example service: a property resolver looked up through its generated factory."""
