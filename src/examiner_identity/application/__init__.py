"""Application layer: lifecycle service, ports, results and DTOs."""
