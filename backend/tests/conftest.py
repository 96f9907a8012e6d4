import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from mallmap.config import Settings
from mallmap.db import Base, get_db
from mallmap.main import create_app
from mallmap.models import Brand, BrandStore, City, District, Mall, Province, User
from mallmap.models.user import ROLE_ADMIN, ROLE_USER
from mallmap.security import create_token, hash_password


@pytest.fixture
def settings(tmp_path):
    return Settings(
        node_env="test",
        dev_database_url="sqlite://",
        jwt_secret="test-secret",
        upload_dir=tmp_path / "uploads",
        public_dir=tmp_path / "public",
        max_file_size=1024,
    )


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(settings, session_factory):
    app = create_app(settings)

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client


def _make_user(db, settings, username, role):
    user = User(
        username=username,
        email=f"{username}@example.com",
        password_hash=hash_password("secret123"),
        role=role,
    )
    db.add(user)
    db.commit()
    token = create_token(settings, user.id, user.email, user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(db, settings):
    return _make_user(db, settings, "admin", ROLE_ADMIN)


@pytest.fixture
def user_headers(db, settings):
    return _make_user(db, settings, "viewer", ROLE_USER)


@pytest.fixture
def geo(db):
    """Two provinces; Beijing has one city with two districts."""
    beijing = Province(name="北京市", code="110000")
    shanghai = Province(name="上海市", code="310000")
    db.add_all([beijing, shanghai])
    db.flush()
    city = City(name="北京市", code="110100", province_id=beijing.id)
    sh_city = City(name="上海市", code="310100", province_id=shanghai.id)
    db.add_all([city, sh_city])
    db.flush()
    chaoyang = District(name="朝阳区", code="110105", city_id=city.id, province_id=beijing.id)
    haidian = District(name="海淀区", code="110108", city_id=city.id, province_id=beijing.id)
    db.add_all([chaoyang, haidian])
    db.commit()
    return {
        "beijing": beijing,
        "shanghai": shanghai,
        "city": city,
        "sh_city": sh_city,
        "chaoyang": chaoyang,
        "haidian": haidian,
    }


@pytest.fixture
def catalog(db, geo):
    """Three malls (one without a district, one in Shanghai) and three brands."""
    skp = Mall(
        name="北京SKP",
        address="建国路87号",
        province_id=geo["beijing"].id,
        city_id=geo["city"].id,
        district_id=geo["chaoyang"].id,
    )
    joy = Mall(name="朝阳大悦城", province_id=geo["beijing"].id, city_id=geo["city"].id, district_id=geo["chaoyang"].id)
    direct = Mall(name="北京站商城", province_id=geo["beijing"].id, city_id=geo["city"].id)
    ifc = Mall(name="上海国金中心", province_id=geo["shanghai"].id, city_id=geo["sh_city"].id)
    apple = Brand(name="Apple", code="APPLE", category="1", score=0)
    dji = Brand(name="DJI", code="DJI", category="2", score=None)
    nike = Brand(name="Nike", code="NIKE", category="3", score=7)
    db.add_all([skp, joy, direct, ifc, apple, dji, nike])
    db.commit()
    return {"skp": skp, "joy": joy, "direct": direct, "ifc": ifc, "apple": apple, "dji": dji, "nike": nike}


@pytest.fixture
def place(db):
    """Create a placement directly, copying the location from the mall."""

    def _place(brand, mall, **fields):
        store = BrandStore(
            brand_id=brand.id,
            mall_id=mall.id,
            province_id=mall.province_id,
            city_id=mall.city_id,
            district_id=mall.district_id,
            **fields,
        )
        db.add(store)
        db.commit()
        return store

    return _place
