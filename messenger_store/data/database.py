"""
Database connection and management
"""
from typing import Optional
from contextlib import asynccontextmanager
import asyncpg
from asyncpg import Pool
from messenger_store.configs.database_config import DatabaseConfig, database_config
from messenger_store.utils.logger import get_logger

logger = get_logger(__name__)

class DatabaseManager:
    """Database Manager"""
    
    def __init__(self, config: DatabaseConfig = database_config):
        self.config = config
        self.pool: Optional[Pool] = None
        self._initialized = False
    
    async def initialize(self):
        """Initialize database connection pool"""
        if self._initialized:
            return
        
        try:
            logger.info("Initializing database connection pool", host=self.config.host, database=self.config.database)
            
            self.pool = await asyncpg.create_pool(
                host=self.config.host,
                port=self.config.port,
                database=self.config.database,
                user=self.config.username,
                password=self.config.password,
                min_size=self.config.min_connections,
                max_size=self.config.max_connections,
                command_timeout=self.config.connection_timeout
            )
            
            # Test connection
            async with self.pool.acquire() as conn:
                await conn.execute("SELECT 1")
            
            self._initialized = True
            logger.info("Database connection pool initialized successfully")
            
        except Exception as e:
            logger.error("Failed to initialize database connection pool", error=str(e))
            raise
    
    async def close(self):
        """Close database connection pool"""
        if self.pool:
            await self.pool.close()
            self._initialized = False
            logger.info("Database connection pool closed")
    
    @asynccontextmanager
    async def get_connection(self):
        """Get database connection context manager"""
        if not self._initialized:
            await self.initialize()
        
        async with self.pool.acquire() as connection:
            yield connection
    
    async def connect_listener(self) -> asyncpg.Connection:
        """Open a dedicated connection for LISTEN, outside the pool"""
        return await asyncpg.connect(
            host=self.config.host,
            port=self.config.port,
            database=self.config.database,
            user=self.config.username,
            password=self.config.password,
            timeout=self.config.connection_timeout
        )
    
    async def _create_documents_table(self):
        """Create documents table"""
        table = self.config.documents_table
        create_documents_sql = f"""
        CREATE TABLE IF NOT EXISTS {table} (
            path TEXT PRIMARY KEY,
            value JSONB NOT NULL,
            version BIGINT NOT NULL DEFAULT 1,
            updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
        );
        """
        async with self.get_connection() as conn:
            await conn.execute(create_documents_sql)
            logger.debug("Documents table created", table=table)
    
    async def _create_triggers(self):
        """Create change notification trigger"""
        table = self.config.documents_table
        channel = self.config.notify_channel
        
        trigger_function_sql = f"""
        CREATE OR REPLACE FUNCTION notify_{table}_changed()
        RETURNS TRIGGER AS $$
        BEGIN
            IF TG_OP = 'DELETE' THEN
                PERFORM pg_notify('{channel}', OLD.path);
            ELSE
                PERFORM pg_notify('{channel}', NEW.path);
            END IF;
            RETURN NULL;
        END;
        $$ language 'plpgsql';
        """
        
        trigger_sql = f"""
        DROP TRIGGER IF EXISTS {table}_changed ON {table};
        CREATE TRIGGER {table}_changed
            AFTER INSERT OR UPDATE OR DELETE ON {table}
            FOR EACH ROW
            EXECUTE FUNCTION notify_{table}_changed();
        """
        
        async with self.get_connection() as conn:
            await conn.execute(trigger_function_sql)
            await conn.execute(trigger_sql)
            logger.debug("Triggers created", channel=channel)

    async def drop_tables(self):
        """Drop all tables (for testing or reset)"""
        table = self.config.documents_table
        drop_sql = f"""
        DROP TABLE IF EXISTS {table} CASCADE;
        DROP FUNCTION IF EXISTS notify_{table}_changed() CASCADE;
        """
        
        async with self.get_connection() as conn:
            await conn.execute(drop_sql)
            logger.info("Database tables dropped")

    async def create_tables(self):
        """Create database tables"""
        try:
            logger.info("Creating database tables...")
            await self._create_documents_table()
            await self._create_triggers()
            logger.info("Database tables created successfully")
            
        except Exception as e:
            logger.error("Failed to create database tables", error=str(e))
            raise
