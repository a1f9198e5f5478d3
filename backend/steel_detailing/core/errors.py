class ContractViolationError(AssertionError):
    """Consulta inválida al motor (p. ej. extremo 1 del primer nodo).

    Indica un error del llamador, no datos de entrada mal formados.
    """
