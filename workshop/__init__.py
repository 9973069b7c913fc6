"""Northern Tech workshop environment -- Pulumi program and operator tooling."""
