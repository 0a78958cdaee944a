"""Infrastructure: config store backends, repositories, credential hashing."""
