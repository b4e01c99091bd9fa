"""Per-resource API services; each is attached to :class:`ghrest.client.GitHubClient`."""
