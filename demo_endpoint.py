"""
Quick demo script to run the BFFlix backend locally.

This script starts a local server and shows how to make requests to the endpoints.
"""

import uvicorn

if __name__ == "__main__":
    print("=" * 60)
    print("Starting BFFlix Backend Demo")
    print("=" * 60)
    print()
    print("📌 API Endpoints:")
    print("   - Health Check:     GET    http://localhost:8000/health")
    print("   - Recommendations:  POST   http://localhost:8000/agent/recommendations")
    print("   - Record viewing:   POST   http://localhost:8000/viewings")
    print("   - My viewings:      GET    http://localhost:8000/viewings/me")
    print("   - Delete viewing:   DELETE http://localhost:8000/viewings/{id}")
    print("   - API Docs:                http://localhost:8000/docs")
    print()
    print("🔐 Authentication:")
    print("   All endpoints (except /health) require:")
    print("   Authorization: Bearer <supabase access token>")
    print()
    print("📝 Test with curl:")
    print('   curl -X POST "http://localhost:8000/agent/recommendations" \\')
    print('     -H "Authorization: Bearer $TOKEN" \\')
    print('     -H "Content-Type: application/json" \\')
    print('     -d \'{"query": "something like Dark but lighter"}\'')
    print()
    print("=" * 60)
    print("Starting server on http://localhost:8000")
    print("Press Ctrl+C to stop")
    print("=" * 60)
    print()

    uvicorn.run(
        "bfflix.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
