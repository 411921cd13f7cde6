"""FastAPI application for the RoomFinder listing marketplace."""
from __future__ import annotations

import base64
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, PlainTextResponse, Response

from .core.config import settings
from .core.log import configure_logging
from .routers import auth as auth_router
from .routers import rooms as rooms_router

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="RoomFinder API", version="0.1.0")

if settings.cors_allow_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(rooms_router.router, prefix="/api/rooms", tags=["rooms"])
app.include_router(auth_router.router, prefix="/api/auth", tags=["auth"])

HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
<head>
    <meta charset=\"UTF-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1.0\" />
    <title>RoomFinder</title>
    <script src=\"https://cdn.tailwindcss.com\"></script>
</head>
<body class=\"min-h-screen bg-gray-50 text-gray-900\">
    <header class=\"border-b bg-white shadow-sm\">
        <div class=\"mx-auto flex max-w-6xl items-center justify-between px-6 py-4\">
            <h1 class=\"text-2xl font-bold\">RoomFinder</h1>
            <div id=\"authArea\" class=\"flex gap-2 text-sm\">
                <input id=\"email\" type=\"email\" placeholder=\"Email\" class=\"rounded-md border px-3 py-1\" />
                <input id=\"password\" type=\"password\" placeholder=\"Password\" class=\"rounded-md border px-3 py-1\" />
                <button id=\"signInButton\" class=\"rounded-md bg-blue-600 px-3 py-1 text-white\">Login</button>
                <button id=\"signUpButton\" class=\"rounded-md border px-3 py-1\">Sign up</button>
            </div>
            <div id=\"accountArea\" class=\"hidden flex items-center gap-3 text-sm\">
                <span id=\"accountLabel\" class=\"text-gray-600\"></span>
                <button id=\"myListingsButton\" class=\"rounded-md border px-3 py-1\">My Listings</button>
                <button id=\"signOutButton\" class=\"rounded-md border px-3 py-1\">Logout</button>
            </div>
        </div>
    </header>

    <main class=\"mx-auto max-w-6xl px-6 py-8\">
        <section class=\"mb-6 rounded-lg bg-white p-6 shadow-md\">
            <h2 class=\"mb-4 text-lg font-semibold\">Search &amp; Filter Rooms</h2>
            <form id=\"filters\" class=\"grid grid-cols-1 gap-4 md:grid-cols-3\">
                <input name=\"search\" placeholder=\"Enter city, area, or room title...\" class=\"rounded-md border px-4 py-2 md:col-span-2\" />
                <input name=\"city\" placeholder=\"Enter city...\" class=\"rounded-md border px-4 py-2\" />
                <input name=\"min_price\" type=\"number\" min=\"0\" placeholder=\"Min rent\" class=\"rounded-md border px-4 py-2\" />
                <input name=\"max_price\" type=\"number\" min=\"0\" placeholder=\"Max rent\" class=\"rounded-md border px-4 py-2\" />
                <select name=\"property_type\" class=\"rounded-md border px-4 py-2\"></select>
                <select name=\"tenant_preference\" class=\"rounded-md border px-4 py-2\"></select>
            </form>
        </section>

        <h2 id=\"heading\" class=\"mb-4 text-2xl font-bold\">Available Rooms</h2>
        <p id=\"status\" class=\"mb-4 text-sm text-red-600\"></p>
        <div id=\"rooms\" class=\"grid grid-cols-1 gap-6 md:grid-cols-2 lg:grid-cols-3\"></div>
    </main>

    <script>
        const DEFAULT_IMAGE = 'https://images.pexels.com/photos/1457842/pexels-photo-1457842.jpeg?auto=compress&cs=tinysrgb&w=600';
        const filtersForm = document.getElementById('filters');
        const roomsEl = document.getElementById('rooms');
        const headingEl = document.getElementById('heading');
        const statusEl = document.getElementById('status');
        let token = localStorage.getItem('roomfinder_token');
        let view = 'home';

        function authHeaders() {
            return token ? { Authorization: `Bearer ${token}` } : {};
        }

        function renderRooms(rooms, manage) {
            roomsEl.innerHTML = '';
            if (!rooms.length) {
                const empty = document.createElement('p');
                empty.className = 'text-gray-600';
                empty.textContent = manage ? "You haven't added any listings yet." : 'No rooms found matching your criteria.';
                roomsEl.appendChild(empty);
                return;
            }
            rooms.forEach((room) => {
                const card = document.createElement('div');
                card.className = 'overflow-hidden rounded-lg bg-white shadow-md';
                const img = document.createElement('img');
                img.src = room.image_url || DEFAULT_IMAGE;
                img.alt = room.title;
                img.className = 'h-48 w-full object-cover';
                const body = document.createElement('div');
                body.className = 'p-4 text-sm';
                const title = document.createElement('h3');
                title.className = 'text-lg font-bold';
                title.textContent = `${room.title} - ${room.rent_price.toLocaleString()}/mo`;
                const meta = document.createElement('p');
                meta.className = 'text-gray-600';
                meta.textContent = `${room.location}, ${room.city} | ${room.property_type} | ${room.tenant_preference}`;
                const contact = document.createElement('p');
                contact.textContent = `${room.owner_name} - ${room.owner_contact} - ${room.owner_email}`;
                body.append(title, meta, contact);
                if (manage) {
                    const toggle = document.createElement('button');
                    toggle.className = 'mr-2 mt-3 rounded-md bg-blue-600 px-3 py-1 text-white';
                    toggle.textContent = `Mark as ${room.is_available ? 'Unavailable' : 'Available'}`;
                    toggle.onclick = () => toggleRoom(room.id);
                    const remove = document.createElement('button');
                    remove.className = 'mt-3 rounded-md bg-red-600 px-3 py-1 text-white';
                    remove.textContent = 'Delete';
                    remove.onclick = () => deleteRoom(room.id);
                    body.append(toggle, remove);
                }
                card.append(img, body);
                roomsEl.appendChild(card);
            });
        }

        async function loadRooms() {
            statusEl.textContent = '';
            const params = new URLSearchParams(new FormData(filtersForm));
            const response = await fetch(`/api/rooms?${params.toString()}`);
            const payload = await response.json();
            if (!response.ok) {
                statusEl.textContent = payload.detail || 'Failed to load rooms. Please try again.';
                return;
            }
            headingEl.textContent = payload.total ? `Available Rooms (${payload.total})` : 'Available Rooms';
            renderRooms(payload.results, false);
        }

        async function loadMyRooms() {
            const response = await fetch('/api/rooms/mine', { headers: authHeaders() });
            const payload = await response.json();
            if (!response.ok) {
                statusEl.textContent = payload.detail || 'Failed to load rooms. Please try again.';
                return;
            }
            headingEl.textContent = payload.total ? `My Listings (${payload.total})` : 'My Listings';
            renderRooms(payload.results, true);
        }

        async function toggleRoom(roomId) {
            const response = await fetch(`/api/rooms/${roomId}/toggle-availability`, { method: 'POST', headers: authHeaders() });
            if (!response.ok) {
                alert('Failed to update room');
                return;
            }
            loadMyRooms();
        }

        async function deleteRoom(roomId) {
            if (!confirm('Are you sure you want to delete this listing?')) return;
            const response = await fetch(`/api/rooms/${roomId}?confirm=true`, { method: 'DELETE', headers: authHeaders() });
            if (!response.ok) {
                alert('Failed to delete room');
                return;
            }
            loadMyRooms();
        }

        async function authenticate(path) {
            const body = {
                email: document.getElementById('email').value,
                password: document.getElementById('password').value,
            };
            const response = await fetch(`/api/auth/${path}`, {
                method: 'POST',
                headers: { 'Content-Type': 'application/json' },
                body: JSON.stringify(body),
            });
            const payload = await response.json();
            if (!response.ok) {
                statusEl.textContent = typeof payload.detail === 'string' ? payload.detail : 'Authentication failed';
                return;
            }
            token = payload.access_token;
            localStorage.setItem('roomfinder_token', token);
            refreshAccount();
        }

        async function refreshAccount() {
            const authArea = document.getElementById('authArea');
            const accountArea = document.getElementById('accountArea');
            if (!token) {
                authArea.classList.remove('hidden');
                accountArea.classList.add('hidden');
                return;
            }
            const response = await fetch('/api/auth/me', { headers: authHeaders() });
            if (!response.ok) {
                token = null;
                localStorage.removeItem('roomfinder_token');
                return refreshAccount();
            }
            const account = await response.json();
            document.getElementById('accountLabel').textContent = account.name || account.email;
            authArea.classList.add('hidden');
            accountArea.classList.remove('hidden');
        }

        async function loadOptions() {
            const response = await fetch('/api/rooms/options');
            const options = await response.json();
            const fill = (name, values) => {
                const select = filtersForm.elements[name];
                [options.wildcard, ...values].forEach((value) => {
                    const option = document.createElement('option');
                    option.value = value;
                    option.textContent = value;
                    select.appendChild(option);
                });
            };
            fill('property_type', options.property_types);
            fill('tenant_preference', options.tenant_preferences);
        }

        filtersForm.addEventListener('input', () => {
            view = 'home';
            loadRooms();
        });
        document.getElementById('signInButton').onclick = () => authenticate('signin');
        document.getElementById('signUpButton').onclick = () => authenticate('signup');
        document.getElementById('myListingsButton').onclick = () => {
            view = view === 'home' ? 'mine' : 'home';
            view === 'mine' ? loadMyRooms() : loadRooms();
        };
        document.getElementById('signOutButton').onclick = async () => {
            await fetch('/api/auth/signout', { method: 'POST', headers: authHeaders() });
            token = null;
            localStorage.removeItem('roomfinder_token');
            view = 'home';
            refreshAccount();
            loadRooms();
        };

        loadOptions().then(loadRooms);
        refreshAccount();
    </script>
</body>
</html>
"""


@app.get("/", response_class=HTMLResponse, tags=["meta"])
async def index() -> HTMLResponse:
    """Serve the single-page browsing UI."""

    return HTMLResponse(content=HTML_PAGE)


@app.head("/", tags=["meta"])
async def index_head() -> Response:
    """Fast health checks issue HEAD /; answer with 200 to avoid noisy 405s."""

    return Response(status_code=200)


FAVICON_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR4nGMAAQAABQABDQottAAAAABJRU5ErkJggg=="
)


@app.get("/api/health", tags=["meta"])
async def health() -> dict[str, str]:
    """Simple liveness probe."""

    return {"status": "ok"}


@app.head("/api/health", tags=["meta"])
async def health_head() -> Response:
    return Response(status_code=200)


@app.get("/robots.txt", response_class=PlainTextResponse, include_in_schema=False)
async def robots() -> PlainTextResponse:
    return PlainTextResponse("User-agent: *\nDisallow:")


@app.get("/favicon.ico", include_in_schema=False)
async def favicon() -> Response:
    """Return a tiny placeholder favicon."""

    return Response(content=FAVICON_BYTES, media_type="image/png")


logger.info("RoomFinder API configured (env=%s)", settings.app_env)
