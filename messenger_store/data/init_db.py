"""
Database initialization script
"""
import asyncio
from messenger_store.data.database import DatabaseManager
from messenger_store.utils.logger import get_logger

logger = get_logger(__name__)

async def init_database(reset: bool = False):
    """Initialize database"""
    db_manager = DatabaseManager()
    try:
        logger.info("Starting database initialization", reset=reset)
        
        # Initialize connection pool
        await db_manager.initialize()
        
        if reset:
            await db_manager.drop_tables()
        
        # Create tables
        await db_manager.create_tables()
        
        logger.info("Database initialization completed successfully")
        
    except Exception as e:
        logger.error("Database initialization failed", error=str(e))
        raise
    finally:
        await db_manager.close()

if __name__ == "__main__":
    import sys
    asyncio.run(init_database(reset="--reset" in sys.argv))
