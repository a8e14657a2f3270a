"""Services: business rules over the repositories, one module per surface."""
