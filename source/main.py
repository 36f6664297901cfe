"""
Основной файл сервиса финансового ассистента.
"""
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
from routers import assistant

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Finance Assistant Microservice",
    description="Потоковый ответ ассистента OpenAI с вызовом инструмента котировок",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(assistant.router)

@app.on_event("startup")
async def startup_event():
    logger.info("Запуск сервиса финансового ассистента")
    if config.settings.assistant_id:
        logger.info(f"Используется ассистент {config.settings.assistant_id}")
    else:
        logger.info("ASSISTANT_ID не задан, ассистент будет создаваться на каждый запрос")

@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Остановка сервиса финансового ассистента")

@app.get("/")
async def root():
    return {"message": "Finance Assistant API", "version": app.version}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=config.HOST,
        port=config.PORT,
        reload=True
    )
