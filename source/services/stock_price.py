"""
Имитация сервиса котировок.
"""
import random


async def get_stock_price(symbol: str) -> str:
    # симуляция сетевого запроса
    return str(random.random() * 1000)
