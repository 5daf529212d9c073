"""hookgate: webhook dispatch gateway for async function hosts."""
