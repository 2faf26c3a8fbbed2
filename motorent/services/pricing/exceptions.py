class PricingError(Exception):
    """Error de dominio del motor de precios."""


class PartNotFound(PricingError):
    def __init__(self, part_id):
        self.part_id = part_id
        super().__init__(f"Repuesto {part_id} no encontrado")


class ListNotFound(PricingError):
    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Lista de precios '{code}' no encontrada")


class NoDefaultList(PricingError):
    """No hay lista explícita, ni de grupo, ni la lista retail por defecto."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"No se pudo determinar lista de precios (falta la lista por defecto '{code}')")


class InvalidInput(PricingError):
    pass
