"""Backend d'inscription Brave Education: catalogue, checkout physique et checkout bKash."""
